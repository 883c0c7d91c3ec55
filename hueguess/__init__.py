"""
Hue Guess multiplayer server package
"""
