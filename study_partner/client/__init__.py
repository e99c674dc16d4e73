"""Client for the study partner HTTP API."""

from .api import StudyPartnerAPI

__all__ = ["StudyPartnerAPI"]
