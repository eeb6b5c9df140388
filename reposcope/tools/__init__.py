"""Tool implementations: root tools, category built-ins and the fallback."""
