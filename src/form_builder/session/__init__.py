"""Form session state machine and the client glue around it."""

from form_builder.session.controller import FormController
from form_builder.session.fetch import FetchState, SupersedingFetcher
from form_builder.session.state import (
    SUBMIT_ERROR_MESSAGE,
    SUCCESS_MESSAGE,
    FormPhase,
    FormSession,
    SubmitOutcome,
)

__all__ = [
    "SUBMIT_ERROR_MESSAGE",
    "SUCCESS_MESSAGE",
    "FetchState",
    "FormController",
    "FormPhase",
    "FormSession",
    "SubmitOutcome",
    "SupersedingFetcher",
]
