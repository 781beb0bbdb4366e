"""
Skills Module
=============

Skill list for the portfolio (name, category, level 1-5).

Read access for admin sessions and API keys, writes for admins only.
"""

from flask import Blueprint

skills_bp = Blueprint(
    'skills',
    __name__,
    url_prefix='/api/skills'
)

from . import routes

__all__ = ['skills_bp']
