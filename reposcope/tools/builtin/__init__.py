"""Built-in tool sets, one package per repository category.

These packages are loaded by location through the plugin loader, the same
way as custom and path-declared tool sources.
"""
