"""
Numeric constants shared by the harmonic operations.
"""

# Boundary conditions: diagonal penalty for fixed vertices
FULL_FIXITY_STIFFNESS = 1e5
PARTIAL_FIXITY_STIFFNESS = 1e3  # used when only some fixed points matched a vertex

# Fixed point matching; models with any vertex further than this from the origin are taken as millimetres
MILLIMETRE_THRESHOLD = 1000.0
METRE_DECIMALS = 3
MILLIMETRE_DECIMALS = 1

# Vertex areas are mapped to [0, AREA_MAP_MAXIMUM] so the cotangent weights are scale independent
AREA_MAP_MAXIMUM = 10.0

# Greyscale colour mapping
COLOUR_PRESCALE = 1000.0
COLOUR_MAX = 255

FEATURE_DECIMALS = 3
WEIGHT_DECIMALS = 2
POINT_MATCH_DECIMALS = 3

# Area calibration bisection
CALIBRATION_MAX_ITERATIONS = 100
CALIBRATION_INITIAL_STEP = 0.1

SVG_FRAME_SIZE = 300
