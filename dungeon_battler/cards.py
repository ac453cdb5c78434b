"""Card database containing every class card."""
from __future__ import annotations

from collections import defaultdict
from typing import Collection, Dict, List, Optional

from .dice import Dice
from .enums import ClassType, EffectType, Rarity, TargetType
from .errors import CatalogError
from .models import Card, Effect

STARTER_DECK_SIZE = 5


def _fx(effect_type: EffectType, value: int, target: TargetType, duration: Optional[int] = None) -> Effect:
    return Effect(effect_type, target, value, duration)


class CardDatabase:
    """Holds every card template that can appear in a deck."""

    def __init__(self) -> None:
        self.all_cards: List[Card] = []
        self.cards_by_id: Dict[str, Card] = {}
        self.cards_by_class: Dict[ClassType, List[Card]] = defaultdict(list)
        self._initialize_cards()

    def get(self, card_id: str) -> Card:
        try:
            return self.cards_by_id[card_id]
        except KeyError:
            raise CatalogError("card", card_id) from None

    def for_class(self, class_type: ClassType) -> List[Card]:
        return list(self.cards_by_class.get(class_type, []))

    def starter_deck(self, class_type: ClassType) -> List[Card]:
        """The first commons of a class make up its starting deck."""
        commons = [c for c in self.cards_by_class[class_type] if c.rarity == Rarity.COMMON]
        return commons[:STARTER_DECK_SIZE]

    # ------------------------------------------------------------------
    # Rewards & shop
    # ------------------------------------------------------------------

    def reward_options(self, class_type: ClassType, owned_ids: Collection[str], size: int = 3) -> List[Card]:
        """First class cards the hero does not already own, matched by id."""
        return [c for c in self.cards_by_class[class_type] if c.id not in owned_ids][:size]

    def generate_shop(
        self, class_type: ClassType, owned_names: Collection[str], dice: Dice, size: int = 3
    ) -> List[Card]:
        """Weighted-by-rarity picks without replacement, excluding owned names."""
        available = [c for c in self.cards_by_class[class_type] if c.name not in owned_names]
        shop: List[Card] = []
        while available and len(shop) < size:
            total = sum(card.rarity.weight for card in available)
            remaining = dice.chance() * total
            selected = len(available) - 1
            for idx, card in enumerate(available):
                remaining -= card.rarity.weight
                if remaining <= 0:
                    selected = idx
                    break
            shop.append(available.pop(selected))
        return shop

    # ------------------------------------------------------------------
    # Card initialization helpers per class
    # ------------------------------------------------------------------

    def _add(self, card: Card) -> None:
        self.all_cards.append(card)
        self.cards_by_id[card.id] = card
        self.cards_by_class[card.class_type].append(card)

    def _initialize_cards(self) -> None:
        self._add_fighter_cards()
        self._add_rogue_cards()
        self._add_paladin_cards()
        self._add_mage_cards()
        self._add_cleric_cards()
        self._add_bard_cards()
        self._add_archer_cards()
        self._add_barbarian_cards()

    def _add_fighter_cards(self) -> None:
        c = ClassType.FIGHTER
        self._add(Card("fighter-1", "Slash", c, Rarity.COMMON, 2, "Deal 8 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 8, TargetType.MONSTER),)))
        self._add(Card("fighter-2", "Shield Bash", c, Rarity.COMMON, 3, "Deal 5 damage and gain 5 shield.",
                       (_fx(EffectType.DAMAGE, 5, TargetType.MONSTER), _fx(EffectType.SHIELD, 5, TargetType.SELF))))
        self._add(Card("fighter-3", "Raise Shields", c, Rarity.COMMON, 4, "Gain 12 shield and Taunt for 1 turn.",
                       (_fx(EffectType.SHIELD, 12, TargetType.SELF), _fx(EffectType.TAUNT, 1, TargetType.SELF, 1))))
        self._add(Card("fighter-7", "Iron Will", c, Rarity.COMMON, 1, "Gain 8 shield.",
                       (_fx(EffectType.SHIELD, 8, TargetType.SELF),)))
        self._add(Card("fighter-4", "Cleave", c, Rarity.UNCOMMON, 3, "Deal 6 damage to all monsters.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.ALL_MONSTERS),)))
        self._add(Card("fighter-5", "Battle Cry", c, Rarity.UNCOMMON, 2, "All allies gain 3 Strength for 2 turns.",
                       (_fx(EffectType.STRENGTH, 3, TargetType.ALL_ALLIES, 2),)))
        self._add(Card("fighter-8", "Reckless Strike", c, Rarity.UNCOMMON, 5, "Deal 20 damage but take 5 damage.",
                       (_fx(EffectType.DAMAGE, 20, TargetType.MONSTER), _fx(EffectType.DAMAGE, 5, TargetType.SELF))))
        self._add(Card("fighter-6", "Execute", c, Rarity.RARE, 4, "Deal 15 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 15, TargetType.MONSTER),)))
        self._add(Card("fighter-9", "Rally", c, Rarity.RARE, 2, "All allies gain 5 shield.",
                       (_fx(EffectType.SHIELD, 5, TargetType.ALL_ALLIES),)))
        self._add(Card("fighter-15", "Riposte", c, Rarity.LEGENDARY, 6, "Deal 30 damage and block the next hit.",
                       (_fx(EffectType.DAMAGE, 30, TargetType.MONSTER), _fx(EffectType.BLOCK, 1, TargetType.SELF, 1))))

    def _add_rogue_cards(self) -> None:
        c = ClassType.ROGUE
        self._add(Card("rogue-1", "Shadowstep", c, Rarity.COMMON, 0, "Gain Stealth for 1 turn.",
                       (_fx(EffectType.STEALTH, 1, TargetType.SELF, 1),)))
        self._add(Card("rogue-3", "Stab", c, Rarity.COMMON, 1, "Deal 8 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 8, TargetType.MONSTER),)))
        self._add(Card("rogue-4", "Cloak of Shadows", c, Rarity.COMMON, 0, "Gain 5 shield and Stealth.",
                       (_fx(EffectType.SHIELD, 5, TargetType.SELF), _fx(EffectType.STEALTH, 1, TargetType.SELF, 1))))
        self._add(Card("rogue-5", "Venomous Strike", c, Rarity.COMMON, 2, "Deal 5 damage and apply 3 poison.",
                       (_fx(EffectType.DAMAGE, 5, TargetType.MONSTER), _fx(EffectType.POISON, 3, TargetType.MONSTER, 2))))
        self._add(Card("rogue-6", "Double Strike", c, Rarity.COMMON, 2, "Deal 6 damage twice.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.MONSTER), _fx(EffectType.DAMAGE, 6, TargetType.MONSTER))))
        self._add(Card("rogue-8", "Sneak Attack", c, Rarity.UNCOMMON, 1, "Deal 10 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 10, TargetType.MONSTER),)))
        self._add(Card("rogue-9", "Dagger Cleave", c, Rarity.UNCOMMON, 2, "Deal 4 damage to all monsters.",
                       (_fx(EffectType.DAMAGE, 4, TargetType.ALL_MONSTERS),)))
        self._add(Card("rogue-15", "Blinding Strike", c, Rarity.RARE, 2, "Deal 12 damage and blind the target.",
                       (_fx(EffectType.DAMAGE, 12, TargetType.MONSTER),
                        _fx(EffectType.ACCURACY, 2, TargetType.MONSTER, 2))))
        self._add(Card("rogue-17", "Acid Splash", c, Rarity.RARE, 2, "Deal 5 damage and 2 poison to all monsters.",
                       (_fx(EffectType.DAMAGE, 5, TargetType.ALL_MONSTERS),
                        _fx(EffectType.POISON, 2, TargetType.ALL_MONSTERS, 2))))
        self._add(Card("rogue-21", "Deathblow", c, Rarity.LEGENDARY, 3, "Deal 40 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 40, TargetType.MONSTER),)))

    def _add_paladin_cards(self) -> None:
        c = ClassType.PALADIN
        self._add(Card("paladin-1", "Shield Bash", c, Rarity.COMMON, 3, "Deal 6 damage and stun.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.MONSTER), _fx(EffectType.STUN, 1, TargetType.MONSTER, 1))))
        self._add(Card("paladin-2", "Blessed Shield", c, Rarity.COMMON, 2, "Gain 10 shield.",
                       (_fx(EffectType.SHIELD, 10, TargetType.SELF),)))
        self._add(Card("paladin-3", "Healing Word", c, Rarity.COMMON, 1, "Heal an ally for 12.",
                       (_fx(EffectType.HEAL, 12, TargetType.ALLY),)))
        self._add(Card("paladin-4", "Righteous Blow", c, Rarity.COMMON, 2, "Deal 9 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 9, TargetType.MONSTER),)))
        self._add(Card("paladin-5", "Prayer of Mending", c, Rarity.COMMON, 1, "Heal all allies for 5.",
                       (_fx(EffectType.HEAL, 5, TargetType.ALL_ALLIES),)))
        self._add(Card("paladin-8", "Consecrate Ground", c, Rarity.UNCOMMON, 3, "Deal 5 damage and 3 burn to all.",
                       (_fx(EffectType.DAMAGE, 5, TargetType.ALL_MONSTERS),
                        _fx(EffectType.BURN, 3, TargetType.ALL_MONSTERS, 3))))
        self._add(Card("paladin-9", "Bless Armor", c, Rarity.UNCOMMON, 2, "Give an ally 12 shield.",
                       (_fx(EffectType.SHIELD, 12, TargetType.ALLY),)))
        self._add(Card("paladin-16", "Resurrect", c, Rarity.RARE, 3, "Revive a fallen ally at 30% HP.",
                       (_fx(EffectType.REVIVE, 30, TargetType.ALLY),)))
        self._add(Card("paladin-15", "Test of Faith", c, Rarity.RARE, 5, "Gain 15 shield and Taunt for 2 turns.",
                       (_fx(EffectType.SHIELD, 15, TargetType.SELF), _fx(EffectType.TAUNT, 1, TargetType.SELF, 2))))
        self._add(Card("paladin-22", "Divine Wrath", c, Rarity.LEGENDARY, 7, "Deal 25 to all and heal all for 15.",
                       (_fx(EffectType.DAMAGE, 25, TargetType.ALL_MONSTERS),
                        _fx(EffectType.HEAL, 15, TargetType.ALL_ALLIES))))

    def _add_mage_cards(self) -> None:
        c = ClassType.MAGE
        self._add(Card("mage-1", "Arcane Bolt", c, Rarity.COMMON, 2, "Deal 10 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 10, TargetType.MONSTER),)))
        self._add(Card("mage-2", "Magic Missile", c, Rarity.COMMON, 2, "Deal 4 damage three times.",
                       (_fx(EffectType.DAMAGE, 4, TargetType.MONSTER),
                        _fx(EffectType.DAMAGE, 4, TargetType.MONSTER),
                        _fx(EffectType.DAMAGE, 4, TargetType.MONSTER))))
        self._add(Card("mage-3", "Mana Shield", c, Rarity.COMMON, 1, "Gain 8 shield.",
                       (_fx(EffectType.SHIELD, 8, TargetType.SELF),)))
        self._add(Card("mage-4", "Firebolt", c, Rarity.COMMON, 2, "Deal 6 damage and apply 2 burn.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.MONSTER), _fx(EffectType.BURN, 2, TargetType.MONSTER, 2))))
        self._add(Card("mage-5", "Ray of Frost", c, Rarity.COMMON, 2, "Deal 6 damage and apply 2 ice.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.MONSTER), _fx(EffectType.ICE, 2, TargetType.MONSTER, 2))))
        self._add(Card("mage-8", "Fireball", c, Rarity.UNCOMMON, 4, "Deal 8 damage and 2 burn to all monsters.",
                       (_fx(EffectType.DAMAGE, 8, TargetType.ALL_MONSTERS),
                        _fx(EffectType.BURN, 2, TargetType.ALL_MONSTERS, 2))))
        self._add(Card("mage-9", "Icy Blast", c, Rarity.UNCOMMON, 3, "Deal 8 damage and 2 ice to all monsters.",
                       (_fx(EffectType.DAMAGE, 8, TargetType.ALL_MONSTERS),
                        _fx(EffectType.ICE, 2, TargetType.ALL_MONSTERS, 2))))
        self._add(Card("mage-16", "Polymorph", c, Rarity.RARE, 2, "Stun a monster for 3 turns.",
                       (_fx(EffectType.STUN, 1, TargetType.MONSTER, 3),)))
        self._add(Card("mage-18", "Meteor", c, Rarity.RARE, 5, "Deal 15 damage and 3 burn to all monsters.",
                       (_fx(EffectType.DAMAGE, 15, TargetType.ALL_MONSTERS),
                        _fx(EffectType.BURN, 3, TargetType.ALL_MONSTERS, 3))))
        self._add(Card("mage-21", "Blizzard", c, Rarity.LEGENDARY, 6, "Deal 20 damage and 5 ice to all monsters.",
                       (_fx(EffectType.DAMAGE, 20, TargetType.ALL_MONSTERS),
                        _fx(EffectType.ICE, 5, TargetType.ALL_MONSTERS, 3))))

    def _add_cleric_cards(self) -> None:
        c = ClassType.CLERIC
        self._add(Card("cleric-1", "Sacred Flame", c, Rarity.COMMON, 2, "Deal 8 damage and apply 2 burn.",
                       (_fx(EffectType.DAMAGE, 8, TargetType.MONSTER), _fx(EffectType.BURN, 2, TargetType.MONSTER, 2))))
        self._add(Card("cleric-2", "Admonish Wickedness", c, Rarity.COMMON, 2, "Deal 6 damage and weaken.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.MONSTER),
                        _fx(EffectType.WEAKNESS, 2, TargetType.MONSTER, 2))))
        self._add(Card("cleric-3", "Cure Wounds", c, Rarity.COMMON, 1, "Heal an ally for 12.",
                       (_fx(EffectType.HEAL, 12, TargetType.ALLY),)))
        self._add(Card("cleric-4", "Healing Word", c, Rarity.COMMON, 1, "Heal all allies for 5.",
                       (_fx(EffectType.HEAL, 5, TargetType.ALL_ALLIES),)))
        self._add(Card("cleric-5", "Prayer of Protection", c, Rarity.COMMON, 1, "Give an ally 10 shield.",
                       (_fx(EffectType.SHIELD, 10, TargetType.ALLY),)))
        self._add(Card("cleric-8", "Pillar of Light", c, Rarity.UNCOMMON, 3, "Deal 10 damage and stun.",
                       (_fx(EffectType.DAMAGE, 10, TargetType.MONSTER), _fx(EffectType.STUN, 1, TargetType.MONSTER, 1))))
        self._add(Card("cleric-9", "Deific Blast", c, Rarity.UNCOMMON, 3, "Deal 6 damage to all monsters.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.ALL_MONSTERS),)))
        self._add(Card("cleric-16", "Purifying Light", c, Rarity.RARE, 2, "Heal all allies for 12 and cleanse.",
                       (_fx(EffectType.HEAL, 12, TargetType.ALL_ALLIES), _fx(EffectType.CLEANSE, 0, TargetType.ALL_ALLIES))))
        self._add(Card("cleric-17", "Revivify", c, Rarity.RARE, 3, "Revive a fallen ally at 40% HP.",
                       (_fx(EffectType.REVIVE, 40, TargetType.ALLY),)))
        self._add(Card("cleric-20", "Mass Renewal", c, Rarity.LEGENDARY, 4, "All allies regenerate 5 HP for 3 turns.",
                       (_fx(EffectType.REGEN, 5, TargetType.ALL_ALLIES, 3),)))

    def _add_bard_cards(self) -> None:
        c = ClassType.BARD
        self._add(Card("bard-1", "Vicious Mockery", c, Rarity.COMMON, 1, "Deal 4 damage and weaken. [Riot]",
                       (_fx(EffectType.DAMAGE, 4, TargetType.MONSTER),
                        _fx(EffectType.WEAKNESS, 2, TargetType.MONSTER, 2))))
        self._add(Card("bard-2", "Lean on Me", c, Rarity.COMMON, 1, "Heal an ally for 12. [Harmony]",
                       (_fx(EffectType.HEAL, 12, TargetType.ALLY),)))
        self._add(Card("bard-3", "Thunderstruck", c, Rarity.COMMON, 2, "Deal 4 damage and stun. [Riot]",
                       (_fx(EffectType.DAMAGE, 4, TargetType.MONSTER), _fx(EffectType.STUN, 1, TargetType.MONSTER, 1))))
        self._add(Card("bard-5", "Heal the World", c, Rarity.COMMON, 1, "Heal all allies for 6. [Harmony]",
                       (_fx(EffectType.HEAL, 6, TargetType.ALL_ALLIES),)))
        self._add(Card("bard-7", "Titanium", c, Rarity.COMMON, 1, "Give an ally 10 shield. [Harmony]",
                       (_fx(EffectType.SHIELD, 10, TargetType.ALLY),)))
        self._add(Card("bard-4", "Eye of the Tiger", c, Rarity.UNCOMMON, 1, "An ally gains 6 Strength for 2 turns. [Harmony]",
                       (_fx(EffectType.STRENGTH, 6, TargetType.ALLY, 2),)))
        self._add(Card("bard-6", "Shout", c, Rarity.UNCOMMON, 2, "Deal 4 damage to all and weaken them. [Riot]",
                       (_fx(EffectType.DAMAGE, 4, TargetType.ALL_MONSTERS),
                        _fx(EffectType.WEAKNESS, 1, TargetType.ALL_MONSTERS, 1))))
        self._add(Card("bard-8", "Livin' on a Prayer", c, Rarity.RARE, 1, "Heal and shield an ally for 10. [Harmony]",
                       (_fx(EffectType.HEAL, 10, TargetType.ALLY), _fx(EffectType.SHIELD, 10, TargetType.ALLY))))
        self._add(Card("bard-10", "Anthem", c, Rarity.RARE, 2, "All allies gain 3 Strength for 2 turns. [Harmony]",
                       (_fx(EffectType.STRENGTH, 3, TargetType.ALL_ALLIES, 2),)))
        self._add(Card("bard-20", "Showstopper", c, Rarity.LEGENDARY, 3, "Stun and expose all monsters. [Riot]",
                       (_fx(EffectType.STUN, 1, TargetType.ALL_MONSTERS, 1),
                        _fx(EffectType.VULNERABLE, 1, TargetType.ALL_MONSTERS, 2))))

    def _add_archer_cards(self) -> None:
        c = ClassType.ARCHER
        self._add(Card("archer-1", "Snipe Shot", c, Rarity.COMMON, 1, "Deal 6 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.MONSTER),)))
        self._add(Card("archer-2", "Quick Shot", c, Rarity.COMMON, 2, "Deal 10 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 10, TargetType.MONSTER),)))
        self._add(Card("archer-3", "Poisoned Arrow", c, Rarity.COMMON, 2, "Deal 5 damage and apply 2 poison.",
                       (_fx(EffectType.DAMAGE, 5, TargetType.MONSTER), _fx(EffectType.POISON, 2, TargetType.MONSTER, 2))))
        self._add(Card("archer-5", "Prepare Trap", c, Rarity.COMMON, 2, "Deal 6 damage and expose the target.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.MONSTER),
                        _fx(EffectType.VULNERABLE, 1, TargetType.MONSTER, 1))))
        self._add(Card("archer-6", "Camouflage", c, Rarity.COMMON, 0, "Gain Stealth for 1 turn.",
                       (_fx(EffectType.STEALTH, 1, TargetType.SELF, 1),)))
        self._add(Card("archer-7", "Barbed Arrow", c, Rarity.COMMON, 2, "Deal 7 damage and weaken.",
                       (_fx(EffectType.DAMAGE, 7, TargetType.MONSTER),
                        _fx(EffectType.WEAKNESS, 1, TargetType.MONSTER, 1))))
        self._add(Card("archer-8", "Buckshot", c, Rarity.UNCOMMON, 3, "Deal 6 damage to all monsters.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.ALL_MONSTERS),)))
        self._add(Card("archer-9", "Take Aim", c, Rarity.UNCOMMON, 2, "Deal 12 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 12, TargetType.MONSTER),)))
        self._add(Card("archer-14", "Volley", c, Rarity.RARE, 3, "Deal 10 damage to all monsters.",
                       (_fx(EffectType.DAMAGE, 10, TargetType.ALL_MONSTERS),)))
        self._add(Card("archer-20", "Heartseeker", c, Rarity.LEGENDARY, 4, "Deal 35 damage to a monster.",
                       (_fx(EffectType.DAMAGE, 35, TargetType.MONSTER),)))

    def _add_barbarian_cards(self) -> None:
        c = ClassType.BARBARIAN
        self._add(Card("barbarian-1", "Reckless Attack", c, Rarity.COMMON, 3, "Deal 14 damage but take 3.",
                       (_fx(EffectType.DAMAGE, 14, TargetType.MONSTER), _fx(EffectType.DAMAGE, 3, TargetType.SELF))))
        self._add(Card("barbarian-2", "Blood Price", c, Rarity.COMMON, 2, "Deal 6 damage but take 8.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.MONSTER), _fx(EffectType.DAMAGE, 8, TargetType.SELF))))
        self._add(Card("barbarian-3", "Ground Slam", c, Rarity.COMMON, 3, "Deal 5 damage to all monsters.",
                       (_fx(EffectType.DAMAGE, 5, TargetType.ALL_MONSTERS),)))
        self._add(Card("barbarian-4", "Thick Skin", c, Rarity.COMMON, 1, "Gain 12 shield.",
                       (_fx(EffectType.SHIELD, 12, TargetType.SELF),)))
        self._add(Card("barbarian-5", "Skull Bash", c, Rarity.COMMON, 3, "Deal 6 damage and stun.",
                       (_fx(EffectType.DAMAGE, 6, TargetType.MONSTER), _fx(EffectType.STUN, 1, TargetType.MONSTER, 1))))
        self._add(Card("barbarian-6", "Intimidate", c, Rarity.COMMON, 2, "Deal 4 damage and weaken.",
                       (_fx(EffectType.DAMAGE, 4, TargetType.MONSTER),
                        _fx(EffectType.WEAKNESS, 2, TargetType.MONSTER, 2))))
        self._add(Card("barbarian-7", "Expose Weakness", c, Rarity.COMMON, 2, "Expose a monster and yourself.",
                       (_fx(EffectType.VULNERABLE, 2, TargetType.MONSTER, 2),
                        _fx(EffectType.VULNERABLE, 2, TargetType.SELF, 2))))
        self._add(Card("barbarian-8", "Cleave", c, Rarity.UNCOMMON, 4, "Deal 10 damage to all monsters.",
                       (_fx(EffectType.DAMAGE, 10, TargetType.ALL_MONSTERS),)))
        self._add(Card("barbarian-9", "Bloodthirst", c, Rarity.UNCOMMON, 3, "Deal 12 damage and heal 6.",
                       (_fx(EffectType.DAMAGE, 12, TargetType.MONSTER), _fx(EffectType.HEAL, 6, TargetType.SELF))))
        self._add(Card("barbarian-20", "Rampage", c, Rarity.LEGENDARY, 6, "Deal 18 damage to all monsters twice.",
                       (_fx(EffectType.DAMAGE, 18, TargetType.ALL_MONSTERS),
                        _fx(EffectType.DAMAGE, 18, TargetType.ALL_MONSTERS))))
