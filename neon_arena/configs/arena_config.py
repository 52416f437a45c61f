"""
Game configuration
Tuning values for the interactive game and the headless environment
"""

# Window / viewport
WINDOW_CONFIG = {
    "width": 1280,
    "height": 720,
    "title": "Neon Arena",
    "resizable": True,
    "fullscreen": False,
}

# Player feel - friction and impulse together decide acceleration/deceleration
PLAYER_CONFIG = {
    "width": 40.0,
    "height": 40.0,
    "speed": 0.5,           # impulse per frame per held direction
    "friction": 0.9,        # velocity multiplier per frame
    "max_hp": 100.0,
    "shoot_interval": 150.0,  # ms
    "bullet_speed": 10.0,     # px per frame
}

# Session rules
SESSION_CONFIG = {
    "contact_damage": 10.0,
    "kill_score": 100,
    "level_heal": 20.0,
    "transition_delay": 2000.0,  # ms
    "spawn_margin": 50.0,        # px outside the viewport edge
    "shake_intensity": 10.0,
    "shake_duration": 200.0,     # ms
}

# ==============================================================================
# LEVEL TABLE
# Levels past the end are generated from the last row
# ==============================================================================

LEVEL_TABLE = [
    {"goal": 10, "spawn_rate": 2000, "enemy_speed": 2, "enemy_hp": 30, "color": "#ff0066"},  # Level 1
    {"goal": 15, "spawn_rate": 1500, "enemy_speed": 3, "enemy_hp": 40, "color": "#ff6600"},  # Level 2
    {"goal": 20, "spawn_rate": 1200, "enemy_speed": 4, "enemy_hp": 50, "color": "#ffcc00"},  # Level 3
    {"goal": 25, "spawn_rate": 1000, "enemy_speed": 5, "enemy_hp": 60, "color": "#ccff00"},  # Level 4
    {"goal": 30, "spawn_rate": 800, "enemy_speed": 6, "enemy_hp": 80, "color": "#00ff66"},   # Level 5
]

# Direction -> key names (lower-case)
KEY_BINDINGS = {
    "up": ("w", "up"),
    "down": ("s", "down"),
    "left": ("a", "left"),
    "right": ("d", "right"),
}

# Audio
AUDIO_CONFIG = {
    "volume": 0.8,
    "sample_rate": 22050,
}

# ==============================================================================
# HEADLESS ENVIRONMENT
# ==============================================================================

ENV_CONFIG = {
    "width": 800,
    "height": 600,
    "frame_ms": 1000 / 60,
    "max_steps": 3600,  # 60 seconds at 60 FPS
    "k_enemies": 5,
}

# Reward shaping for the headless environment
REWARD_CONFIG = {
    "R_KILL": 1.0,       # per enemy destroyed
    "R_DAMAGE": 0.1,     # per hp lost
    "R_DEATH": 5.0,
    "R_TIME": 0.001,
}
