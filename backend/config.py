import os

basedir = os.path.abspath(os.path.dirname(__file__))


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(basedir, 'atlas.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    # Where scores and the game session live: 'sql' (SQLAlchemy) or 'json' (single file)
    STORE_BACKEND = os.environ.get('STORE_BACKEND', 'sql')
    JSON_STORE_PATH = os.environ.get('JSON_STORE_PATH') or os.path.join(basedir, 'data.json')
    # Optional: alternate nation list (JSON array of names). Defaults to the bundled catalog.
    NATIONS_FILE = os.environ.get('NATIONS_FILE')
    GUEST_USERNAME = os.environ.get('GUEST_USERNAME', 'Guest')
    STARTING_LETTER = os.environ.get('STARTING_LETTER', 'S')
    # Optional: seed the computer's choices for reproducible games. Unset means system randomness.
    RANDOM_SEED = int(os.environ['RANDOM_SEED']) if os.environ.get('RANDOM_SEED') else None
