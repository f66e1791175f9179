"""Gameplay constants. Tunables that players may override live in config.py."""

SCREEN_WIDTH = 1024
SCREEN_HEIGHT = 720
FPS = 60
MAX_FRAME_DT = 0.05

# Bottom UI band: two rows of 64px buttons with 10px padding
UI_ROWS = 2
UI_ROW_HEIGHT = 64
UI_ROW_PADDING = 10
SAFE_BOTTOM = UI_ROWS * UI_ROW_HEIGHT + (UI_ROWS + 1) * UI_ROW_PADDING

# World bounds
WORLD_TOP = 80
PLAYER_HALF_EXTENT = 16
NPC_ZONE_MARGIN = 20
NPC_PICK_RADIUS = 20
PICKUP_RADIUS = 20

# Player
PLAYER_BASE_SPEED = 120
PLAYER_MAX_HP = 100
PLAYER_START_GOLD = 50
PLAYER_START_SKILLS = {"charisma": 0.5, "strength": 0.5, "agility": 0.5}
FAINT_GOLD_PENALTY = 10

# NPCs
NPC_SKILLS = ("charisma", "strength", "agility")
NPC_DIFFICULTY_MIN = 0.4
NPC_DIFFICULTY_SPAN = 0.4
NPC_WANDER_CHANCE = 0.01
NPC_WANDER_SPEED = 40
INTERIOR_WANDER_CHANCE = 0.02
INTERIOR_WANDER_SPEED = 20

# Buildings, interiors and obstacles
BUILDING_MIN_SIZE = 80
BUILDING_ZONE_FRACTION = 0.25
BUILDING_HEIGHT_FRACTION = 0.15
BUILDING_PLACEMENT_ATTEMPTS = 10
BUILDING_BUCKET_WIDTH = 50
DOOR_WIDTH_FRACTION = 0.2
DOOR_HEIGHT = 10
INTERIOR_MAX_WIDTH = 600
INTERIOR_MAX_HEIGHT = 400
INTERIOR_SPAWN_INSET = 60
OBSTACLES_PER_ZONE = 3
OBSTACLE_MIN_SIZE = 40
OBSTACLE_SIZE_SPAN = 80

# Quests and skill checks
SKILL_CHECK_OFFSET = 0.5
SKILL_CHECK_FAIL_DAMAGE = 10
STEP_REWARD_GOLD = 20
QUEST_REWARD_GOLD = 50
GRANT_REWARD_GOLD = 5

# Items, abilities and status effects
CONSUMABLE_HEAL = 30
CONSUMABLE_BUFF_VALUE = 0.3
CONSUMABLE_BUFF_DURATION = 15.0
ABILITY_HEAL = 25
ABILITY_BUFF_VALUE = 0.5
ABILITY_RANDOM_BUFF_VALUE = 0.3
ABILITY_BUFF_DURATION = 10.0
ABILITY_COOLDOWN = 30.0
ABILITY_SLOTS = 5
RANDOM_BUFF_TYPES = ("speed", "strength")

# Shop
SHOP_STOCK_SIZE = 6
PRICE_EQUIPMENT = 30
PRICE_QUEST = 10
PRICE_DEFAULT = 20

# Messages
MESSAGE_DURATION = 3.0

# Influence tags recorded from dialogue options
INFLUENCE_POSITIVE_TAG = "demiurge_affinity"
INFLUENCE_NEGATIVE_TAG = "resistance"
INFLUENCE_DAMPING = 10

# Colors
COLOR_BACKGROUND = (12, 13, 20)
COLOR_OBSTACLE = (26, 26, 36)
COLOR_BUILDING = (36, 37, 57)
COLOR_DOOR = (107, 111, 128)
COLOR_INTERIOR = (21, 23, 36)
COLOR_PLAYER = (240, 240, 255)
COLOR_PICKUP = (250, 210, 60)
COLOR_PANEL_BG = (20, 22, 34, 230)
COLOR_BUTTON = (48, 52, 78)
COLOR_TEXT = (230, 230, 230)
COLOR_TEXT_DIM = (150, 150, 160)
COLOR_HP_BAR = (200, 60, 60)
COLOR_MONEY_TEXT = (255, 215, 0)
