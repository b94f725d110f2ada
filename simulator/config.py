# simulator/config.py

SIM_CONFIG = {
    # ======================
    # Lines
    # ======================
    "line_count": 16,
    "active_lines": 14,
    "defined_lines": 12,

    "definitions": [
        {
            "brand": "Maillefer",
            "principale": {"dimensions": "Ø60 x 25D", "reference": "VIS-ML-60-25"},
            "secondaire": {"dimensions": "Ø45 x 20D", "reference": "VIS-ML-45-20"},
        },
        {
            "brand": "Rosendahl",
            "principale": {"dimensions": "Ø90 x 30D", "reference": "VIS-RS-90-30"},
            "secondaire": {"dimensions": "Ø60 x 24D", "reference": "VIS-RS-60-24"},
        },
        {
            "brand": "Nokia-Maillefer",
            "principale": {"dimensions": "Ø75 x 28D", "reference": "VIS-NM-75-28"},
            "secondaire": {"dimensions": "Ø50 x 22D", "reference": "VIS-NM-50-22"},
        },
        {
            "brand": "Samp",
            "principale": {"dimensions": "Ø80 x 26D", "reference": "VIS-SP-80-26"},
            "secondaire": {"dimensions": "Ø55 x 21D", "reference": "VIS-SP-55-21"},
        },
    ],

    "line_remarks": [
        "RAS - Fonctionnement normal",
        "Vibrations légères détectées",
        "Prochaine maintenance planifiée",
        "Pièce de rechange commandée",
        "",
        "Observation: usure accélérée",
    ],

    # ======================
    # Sessions (µm)
    # ======================
    "points": 15,
    "screw_range": (58.0, 66.0),
    "barrel_range": (5500.0, 6100.0),
    "counter_range": (1000, 10000),

    # ======================
    # Archive
    # ======================
    "archived_lines": 10,
    "sessions_per_line": 3,
    "session_spacing_months": 4,
    "archive_remarks": [
        "Mesures conformes aux spécifications",
        "Usure normale constatée",
        "Pièces à commander pour prochaine intervention",
        "Remplacement effectué",
        "Contrôle de routine",
        "",
    ],

    # ======================
    # MQTT
    # ======================
    "broker": "localhost",
    "port": 1883,
    "topic_prefix": "wear/sessions",
}
