"""Word lists used by the roster and crew builders."""

NAME_ADJECTIVES = [
    "Atomic", "Bitter", "Blazing", "Brutal", "Cosmic", "Crimson", "Cyber",
    "Dainty", "Deadly", "Electric", "Feral", "Fierce", "Frantic", "Grim",
    "Hazard", "Iron", "Lethal", "Lucky", "Mad", "Mean", "Neon", "Nuclear",
    "Pretty", "Rapid", "Reckless", "Rogue", "Savage", "Scarlet", "Sinister",
    "Slick", "Sonic", "Spicy", "Steel", "Stormy", "Sweet", "Thunder",
    "Toxic", "Vicious", "Wicked", "Wild",
]

NAME_NOUNS = [
    "Anarchy", "Banshee", "Bombshell", "Bruiser", "Chaos", "Cyclone",
    "Dagger", "Demolition", "Dynamite", "Fury", "Gremlin", "Havoc",
    "Hurricane", "Jinx", "Knockout", "Maverick", "Mayhem", "Menace",
    "Nightmare", "Outlaw", "Panic", "Phantom", "Pistol", "Rampage", "Riot",
    "Rocket", "Ruckus", "Sabotage", "Siren", "Slammer", "Spitfire",
    "Tornado", "Trouble", "Vandal", "Venom", "Viper", "Vixen", "Wrecker",
]

PLACE_NAMES = [
    "Ashford", "Bramley", "Castleton", "Dunmore", "Eastbrook", "Fairhaven",
    "Glenwood", "Harrowgate", "Ironbridge", "Kingsport", "Lakeside",
    "Millbrook", "Northfield", "Oakridge", "Portwell", "Queensbury",
    "Redcliff", "Stonehaven", "Thornbury", "Westmere",
]

COLORS = [
    "Black", "Blue", "Gold", "Green", "Orange", "Pink", "Purple", "Red",
    "Silver", "Teal", "White", "Yellow",
]
