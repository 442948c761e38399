# src/homonyms/core/homophones.py
"""
Homophone finder backed by a static curated table.

The table is authored as groups of words that share a pronunciation. The lookup
index is generated from the groups, so "a lists b" always implies "b lists a".
No phonetic algorithm and no fuzzy matching: unknown words have no homophones.
"""

from homonyms.core.lookup import normalize


# Letters that sound like words.
SINGLE_LETTER_GROUPS: list[tuple[str, ...]] = [
    ("b", "be", "bee"),
    ("c", "sea", "see"),
    ("i", "eye"),
    ("o", "oh"),
    ("p", "pea", "pee"),
    ("r", "are"),
    ("t", "tea", "tee"),
    ("u", "you"),
    ("y", "why"),
]

HOMOPHONE_GROUPS: list[tuple[str, ...]] = [
    # A
    ("ail", "ale"),
    ("ate", "eight"),
    # B
    ("bail", "bale"),
    ("bao", "bow"),
    ("bare", "bear"),
    ("beat", "beet"),
    ("been", "bean"),
    ("berth", "birth"),
    ("blew", "blue"),
    ("board", "bored"),
    ("brake", "break"),
    ("bread", "bred"),
    ("buy", "by", "bye"),
    # C
    ("cale", "kale", "kail"),
    ("cease", "seas", "sees", "seize"),
    ("cell", "sell"),
    ("cent", "sent", "scent"),
    ("cereal", "serial"),
    ("cheap", "cheep"),
    ("choose", "chews"),
    ("chute", "shoot"),
    ("cite", "sight", "site"),
    ("coarse", "course"),
    ("creak", "creek"),
    ("crews", "cruise"),
    # D
    ("dear", "deer"),
    ("dew", "do", "due"),
    ("die", "dye"),
    ("doe", "dough"),
    # E
    ("earn", "urn"),
    ("ewe", "you"),
    # F
    ("fair", "fare"),
    ("feat", "feet"),
    ("find", "fined"),
    ("fir", "fur"),
    ("flea", "flee"),
    ("flew", "flu", "flue"),
    ("flour", "flower"),
    ("for", "four", "fore"),
    ("foul", "fowl"),
    # G
    ("gait", "gate"),
    ("gene", "jean"),
    ("groan", "grown"),
    ("guest", "guessed"),
    # H
    ("hair", "hare"),
    ("hall", "haul"),
    ("heal", "heel"),
    ("hear", "here"),
    ("heard", "herd"),
    ("hence", "hens"),
    ("hi", "high"),
    ("him", "hymn"),
    ("hole", "whole"),
    ("hour", "our"),
    # I
    ("idle", "idol"),
    ("its", "it's"),
    # K
    ("knead", "need"),
    ("knew", "new"),
    ("knight", "night"),
    ("knot", "not"),
    ("know", "no"),
    ("knows", "nose"),
    # L
    ("lead", "led"),
    ("leak", "leek"),
    ("lean", "lien"),
    # M
    ("made", "maid"),
    ("mail", "male"),
    ("main", "mane"),
    ("mat", "matte"),
    ("meat", "meet"),
    ("might", "mite"),
    ("miner", "minor"),
    ("missed", "mist"),
    ("moose", "mousse"),
    # N
    ("naval", "navel"),
    ("none", "nun"),
    # O
    ("oar", "or", "ore"),
    ("one", "won"),
    # P
    ("pail", "pale"),
    ("pain", "pane"),
    ("pair", "pear"),
    ("peace", "piece"),
    ("peak", "peek"),
    ("pi", "pie"),
    ("plain", "plane"),
    ("pole", "poll"),
    ("poor", "pour"),
    ("pray", "prey"),
    ("principal", "principle"),
    # R
    ("rain", "rein", "reign"),
    ("raise", "rays"),
    ("read", "reed"),
    ("read", "red"),
    ("right", "rite", "write"),
    ("road", "rode"),
    ("role", "roll"),
    ("root", "route"),
    # S
    ("sail", "sale"),
    ("scene", "seen"),
    ("seam", "seem"),
    ("sew", "so", "sow"),
    ("son", "sun"),
    ("stair", "stare"),
    ("stationary", "stationery"),
    ("steal", "steel"),
    ("suite", "sweet"),
    # T
    ("tail", "tale"),
    ("team", "teem"),
    ("tear", "tier"),
    ("thai", "thigh"),
    ("their", "there", "they're"),
    ("threw", "through"),
    ("throne", "thrown"),
    ("tide", "tied"),
    ("to", "too", "two"),
    ("toe", "tow"),
    # V
    ("veil", "wail", "whale"),
    ("vet", "wet", "whet"),
    ("vile", "while"),
    ("vow", "wow"),
    # W
    ("wade", "weighed"),
    ("waist", "waste"),
    ("wait", "weight"),
    ("waive", "wave"),
    ("ware", "wear", "where"),
    ("way", "weigh"),
    ("weak", "week"),
    ("weather", "whether"),
    ("which", "witch"),
    ("wood", "would"),
    ("your", "you're"),
]

# Groups the seeder saves into a fresh collection.
CURATED_GROUPS: list[tuple[str, ...]] = SINGLE_LETTER_GROUPS + [
    ("ail", "ale"),
    ("bao", "bow"),
    ("bail", "bale"),
    ("bare", "bear"),
    ("bean", "been"),
    ("beat", "beet"),
    ("berth", "birth"),
    ("board", "bored"),
    ("blew", "blue"),
    ("by", "bye", "buy"),
    ("cale", "kale"),
    ("cease", "seas", "sees", "seize"),
    ("cent", "scent", "sent"),
    ("chute", "shoot"),
    ("dear", "deer"),
    ("doe", "dough"),
    ("earn", "urn"),
    ("fair", "fare"),
    ("flea", "flee"),
    ("flew", "flu"),
    ("hair", "hare"),
    ("hi", "high"),
    ("heard", "herd"),
    ("hence", "hens"),
    ("hour", "our"),
    ("knight", "night"),
    ("knot", "not"),
    ("know", "no"),
    ("knows", "nose"),
    ("lead", "led"),
    ("leak", "leek"),
    ("mail", "male"),
    ("maid", "made"),
    ("mat", "matte"),
    ("one", "won"),
    ("oar", "or", "ore"),
    ("pail", "pale"),
    ("pair", "pear"),
    ("peace", "piece"),
    ("pi", "pie"),
    ("pole", "poll"),
    ("principal", "principle"),
    ("rain", "rein", "reign"),
    ("read", "reed"),
    ("read", "red"),
    ("right", "rite", "write"),
    ("roll", "role"),
    ("scene", "seen"),
    ("seam", "seem"),
    ("sail", "sale"),
    ("so", "sow"),
    ("stationary", "stationery"),
    ("steel", "steal"),
    ("team", "teem"),
    ("their", "there", "they're"),
    ("thigh", "thai"),
    ("to", "too"),
    ("toe", "tow"),
    ("veil", "wail", "whale"),
    ("vet", "wet", "whet"),
    ("vow", "wow"),
    ("vile", "while"),
    ("waist", "waste"),
    ("wait", "weight"),
    ("waive", "wave"),
    ("weak", "week"),
    ("weather", "whether"),
    ("witch", "which"),
]


def build_index(groups: list[tuple[str, ...]]) -> dict[str, list[str]]:
    """word -> co-homophones, in group order, without duplicates."""
    index: dict[str, list[str]] = {}
    for group in groups:
        for word in group:
            others = index.setdefault(word, [])
            for other in group:
                if other != word and other not in others:
                    others.append(other)
    return index


HOMOPHONES = build_index(HOMOPHONE_GROUPS + SINGLE_LETTER_GROUPS)
LETTERS = frozenset(group[0] for group in SINGLE_LETTER_GROUPS)


def get_homophones(word: str) -> list[str]:
    return list(HOMOPHONES.get(normalize(word), []))


def is_single_letter(word: str) -> bool:
    return normalize(word) in LETTERS


def has_word(word: str) -> bool:
    return normalize(word) in HOMOPHONES


def all_words() -> list[str]:
    return sorted(HOMOPHONES)
