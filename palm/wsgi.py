import os

from palm.app import create_app

# Create the app instance
app = create_app(os.getenv('FLASK_CONFIG', 'development'))

if __name__ == '__main__':
    app.run(debug=True)
