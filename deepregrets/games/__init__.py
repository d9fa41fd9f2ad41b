"""
Games module - Content packs for the engine.

Each game has its own subpackage with:
- Lookup tables (fish, trinkets, shop items, characters)
- A content bundle factory
- Initial state setup
"""
