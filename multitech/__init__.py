"""Multi-techs utility -- scaffolds web, backend and database projects.

Quick usage::

    multitech create my-app -c web -t reactjs
    multitech databases:mongodb my-mongo-db
"""

__version__ = "1.2.0"

__all__ = ["__version__"]
