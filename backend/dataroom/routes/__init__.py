from importlib import import_module

modules = [
    'auth',
    'users',
    'datarooms',
    'access',
    'folders',
    'files',
    'storage',
    'search',
]

for m in modules:
    import_module(f'.{m}', __name__)

__all__ = modules
