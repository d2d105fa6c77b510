from careers.models.candidate import Candidate
from careers.models.employer import Employer
from careers.models.job import Job
from careers.models.application import Application

__all__ = ["Candidate", "Employer", "Job", "Application"]
