"""Domain modules package."""

from app.modules.catalog import models as catalog_models  # noqa: F401
from app.modules.contact import models as contact_models  # noqa: F401
from app.modules.enrollment import models as enrollment_models  # noqa: F401
from app.modules.identity import models as identity_models  # noqa: F401
from app.modules.student import models as student_models  # noqa: F401
from app.modules.timetable import models as timetable_models  # noqa: F401
