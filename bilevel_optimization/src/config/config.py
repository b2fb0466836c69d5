# tolerance used by the feasibility checks in tools
EPS = 1e-7

LOG_FORMAT = '[%(name)s]: %(message)s'
LOG_DATEFMT = '%m.%d.%Y %H:%M:%S'

# right-hand side of the toll budget row in BilevelTollSetting
DEFAULT_TOLL_BUDGET = 100.0

# weights of the random s-t graph arcs are drawn from [0, WEIGHT_FACTOR * n]
WEIGHT_FACTOR = 10
