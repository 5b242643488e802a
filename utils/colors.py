"""
Color palette for Maze Runner 3D
"""

# Background colors
COLOR_CEILING = (28, 30, 40)      # Ceiling fill
COLOR_FLOOR = (46, 42, 38)        # Floor fill

# UI colors
COLOR_WALL = (170, 170, 185)      # Maze walls
COLOR_TEXT = (210, 210, 210)      # Normal text
COLOR_TEXT_HIGHLIGHT = (255, 230, 160)  # Highlighted text
COLOR_MENU_OVERLAY = (0, 0, 0, 170)

# Entity colors
COLOR_PLAYER = (70, 140, 255)     # Player
COLOR_GOAL = (60, 200, 120)       # Exit
COLOR_START = (90, 90, 200)       # Start cell (minimap)

# Pickup colors, one per kind
COLOR_PICKUP_GEM = (255, 80, 160)
COLOR_PICKUP_COIN = (255, 210, 60)
COLOR_PICKUP_ORB = (80, 220, 255)
COLOR_PICKUP_KEY = (255, 150, 60)
COLOR_PICKUP_CRYSTAL = (180, 120, 255)

PICKUP_COLORS = {
    'gem': COLOR_PICKUP_GEM,
    'coin': COLOR_PICKUP_COIN,
    'orb': COLOR_PICKUP_ORB,
    'key': COLOR_PICKUP_KEY,
    'crystal': COLOR_PICKUP_CRYSTAL,
}
