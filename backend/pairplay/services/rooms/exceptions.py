class RoomError(Exception):
    """Base class for errors surfaced to the requesting connection only."""
    default_message = 'Room error'

    def __init__(self, message=None, code=None):
        self.message = message or self.default_message
        self.code = code
        super().__init__(self.message)


class RoomNotFound(RoomError):
    default_message = 'Room not found'


class RoomFull(RoomError):
    default_message = 'Room is full'


class CapacityExhausted(RoomError):
    """Raised when no free room code was found within the retry budget."""
    default_message = 'Could not allocate a room code'
