from . import models, logic
from . import leveling
