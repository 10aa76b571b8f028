from . import models, logic
