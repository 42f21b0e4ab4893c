from smartbooking.workflow.booking_workflow import BookingWorkflow

__all__ = ["BookingWorkflow"]
