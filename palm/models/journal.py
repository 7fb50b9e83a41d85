from palm.extensions import db
from palm.utils import utcnow, isoformat

journal_entry_tags = db.Table(
    'journal_entry_tags',
    db.Column('journal_entry_id', db.Integer, db.ForeignKey('journal_entries.id', ondelete='CASCADE'), primary_key=True),
    db.Column('tag_id', db.Integer, db.ForeignKey('tags.id', ondelete='CASCADE'), primary_key=True),
)


class JournalEntry(db.Model):
    __tablename__ = 'journal_entries'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    text = db.Column(db.Text, nullable=False)
    date_time = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    user = db.relationship('User', backref=db.backref('journal_entries', lazy=True, cascade='all, delete-orphan'))
    tags = db.relationship('Tag', secondary=journal_entry_tags, lazy=True, order_by='Tag.name',
                           backref=db.backref('journal_entries', lazy=True))

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'text': self.text,
            'date_time': isoformat(self.date_time),
            'tags': [tag.to_dict() for tag in self.tags],
            'created_at': isoformat(self.created_at),
            'updated_at': isoformat(self.updated_at)
        }


class Tag(db.Model):
    __tablename__ = 'tags'
    __table_args__ = (db.UniqueConstraint('user_id', 'name', name='uq_tags_user_name'),)

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    name = db.Column(db.String(50), nullable=False)
    color = db.Column(db.String(7), nullable=False, default='#6366f1')
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self, usage_count=None):
        data = {
            'id': self.id,
            'name': self.name,
            'color': self.color,
            'created_at': isoformat(self.created_at)
        }
        if usage_count is not None:
            data['usage_count'] = usage_count
        return data
