from .advisor import StaticAdvisor, advise_safely, fetch_advice
from .feedback import FeedbackEvent, NullFeedback, RecordingFeedback
from .notifier import LogNotifier, NullNotifier, ThrottledNotifier
