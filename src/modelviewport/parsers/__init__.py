"""
Auto-import all reader modules to ensure registration side-effects run.

After importing this package, `registry.registered_formats()` and `ParserRouter`
know about every available reader.
"""
from __future__ import annotations

import importlib
import pkgutil

from modelviewport.parsers import readers as _readers_pkg

for _module in pkgutil.iter_modules(_readers_pkg.__path__, _readers_pkg.__name__ + "."):
    importlib.import_module(_module.name)
