from inscriptions.models.registration import Registration

__all__ = ['Registration']
