# Schemas package (re-export feature modules for stable imports)
from .appointments.appointment import *
from .patients.patient import *
from .doctors.doctor import *
from .common.common import *
