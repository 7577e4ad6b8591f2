from typing import Optional

from realty_auth.app.use_cases.auth.dtos import CamelModel


class UpdateProfileCommand(CamelModel):
    """Partial profile update; None means leave the field alone"""

    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None
