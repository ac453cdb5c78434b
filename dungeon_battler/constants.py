"""Balance constants shared by the combat engine."""
from __future__ import annotations

# Turn flow
CARDS_DRAWN_PER_TURN = 2
BETWEEN_ROUND_HEAL_PERCENT = 0.5
GOLD_PER_ALIVE_PLAYER = 1
REWARD_CHOICES = 3
SHOP_CHOICES = 3

# Elite modifiers
ENRAGED_DAMAGE_MULTIPLIER = 1.5
REGENERATING_HEAL_AMOUNT = 10
SHIELDED_REGEN_PERCENT = 0.1
SHIELDED_MAX_PERCENT = 0.2
ARMORED_DAMAGE_REDUCTION = 0.25
CURSE_DEBUFF_VALUE = 2
CURSE_DEBUFF_DURATION = 2
ELITE_GOLD_BONUS = 5
ELITE_XP_BONUS = 10

# Monster scaling: floor(base_hp * (1 + (level - 1) * MONSTER_HP_PER_LEVEL))
MONSTER_HP_PER_LEVEL = 0.5
MONSTER_GOLD_PER_LEVEL = 5
MONSTER_XP_PER_LEVEL = 10

# Class resources
WARRIOR_RAGE_DIVISOR = 10
WARRIOR_RAGE_MAX_GAIN = 2
WARRIOR_RAGE_DAMAGE_DIVISOR = 15
WARRIOR_RAGE_DAMAGE_MAX_GAIN = 2
ROGUE_COMBO_GAIN = 1
HEALER_RESOURCE_GAIN = 2
BARD_INSPIRATION_GAIN = 1
ARCHER_FOCUS_GAIN = 1
ARCHER_FOCUS_LOSS = 1
MAGE_MANA_REGEN = 1

# Attribute scaling: value * (1 + (stat - BASE_STAT_VALUE) * multiplier)
BASE_STAT_VALUE = 10
STR_DAMAGE_MULTIPLIER = 0.03
INT_DAMAGE_MULTIPLIER = 0.04
WIS_HEAL_MULTIPLIER = 0.035
CON_SHIELD_MULTIPLIER = 0.025

# Crits and dodge
BASE_CRIT_CHANCE = 0.05
CRIT_CHANCE_PER_LCK = 0.005
BASE_CRIT_MULTIPLIER = 1.5
CRIT_MULTIPLIER_PER_LCK = 0.005
DODGE_CHANCE_PER_AGI = 0.005

VULNERABLE_MULTIPLIER = 1.5
DEFAULT_REVIVE_PERCENT = 30

# Presentation delays (milliseconds at normal speed)
DICE_ROLL_DELAY_MS = 1500
ACTION_DELAY_MS = 1500
DAMAGE_DELAY_MS = 1800
PHASE_DELAY_MS = 800
