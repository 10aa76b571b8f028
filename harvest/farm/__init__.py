from . import models, logic, render
