from typing import Any, Dict, List, Optional


class InvalidExpenseError(ValueError):
    """Raised when a raw expense record fails validation before settlement"""

    def __init__(self, message: str, index: Optional[int] = None, errors: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.index = index
        self.errors = errors or []
