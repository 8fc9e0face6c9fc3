"""
Nestlet CLI.

Usage:
    nestlet serve app.main:AppModule
    nestlet routes app.main:AppModule
    nestlet modules app.main:AppModule
"""

from .. import __version__

__cli_name__ = "nestlet"
