"""Published ADS-B test vectors for validation.

These are real ADS-B frames from published sources (pyModeS documentation,
academic papers). Each frame has a known hex string and expected decoded
values.

Sources:
- pyModeS documentation: https://mode-s.org/decode/
- Junzi Sun, "The 1090 Megahertz Riddle" (2nd ed.)
"""

# DF17 TC9-18: Airborne Position (CPR encoded)
# Format: (hex_string, expected_icao, type_code, cpr_format, cpr_lat, cpr_lon)
POSITION_FRAMES = [
    # Even/odd pair from "The 1090MHz Riddle"
    # Even frame (cpr_format=0)
    ("8D40621D58C382D690C8AC2863A7", "40621D", 11, 0, 93000, 51372),
    # Odd frame (cpr_format=1)
    ("8D40621D58C386435CC412692AD6", "40621D", 11, 1, 74158, 50194),
]

# Expected position after global CPR decode of the above pair, even frame newer
POSITION_DECODED = {
    "icao": "40621D",
    "lat": 52.2572,   # approximate
    "lon": 3.9194,    # approximate
}

# DF17 frames that are not airborne positions
# Format: (hex_string, expected_icao, type_code)
NON_POSITION_FRAMES = [
    ("8D4840D6202CC371C32CE0576098", "4840D6", 4),   # Identification: KLM1023
    ("8D485020994409940838175B284F", "485020", 19),  # Airborne velocity
]
