from shakegate.protocols.clock import Clock
from shakegate.protocols.feedback import FeedbackDevice
from shakegate.protocols.sensors import SampleHandler, SensorSource, SubscriptionHandle
from shakegate.protocols.storage import KeyValueStore

__all__ = [
    "Clock",
    "FeedbackDevice",
    "KeyValueStore",
    "SampleHandler",
    "SensorSource",
    "SubscriptionHandle",
]
