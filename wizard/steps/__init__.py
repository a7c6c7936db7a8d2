"""Step controllers of the order wizard."""

from wizard.steps.collection_site import CollectionSiteStep
from wizard.steps.communications import CommunicationPreferences
from wizard.steps.order_information import OrderInfoState, OrderInformationStep
from wizard.steps.participant_information import ParticipantInformationStep
from wizard.steps.submit_order import SubmitOrderStep

__all__ = [
    "CollectionSiteStep",
    "CommunicationPreferences",
    "OrderInfoState",
    "OrderInformationStep",
    "ParticipantInformationStep",
    "SubmitOrderStep",
]
