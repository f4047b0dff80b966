"""
Shared Flask-SQLAlchemy handle.

Bound to an application in create_app() via db.init_app(app).
"""
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
