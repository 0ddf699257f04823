from .poll import poll_with_deadline as poll_with_deadline
from .readiness_waiter import ReadinessWaiter as ReadinessWaiter
