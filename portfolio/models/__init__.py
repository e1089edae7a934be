"""
Clinical R&D Portfolio Platform
SQLAlchemy database instance shared by all models.
"""

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()
