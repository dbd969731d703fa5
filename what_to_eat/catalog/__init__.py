"""
Menu catalog.

Responsibilities:
- Expose the selectable menu items (the decision candidates).
- Seed restaurants and dishes from the bundled CSV on first start.

The catalog is read-only at runtime.
"""
