"""
Cross-cutting helpers shared by every crew center app.
"""
