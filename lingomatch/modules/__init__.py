"""Domain modules package."""

from lingomatch.modules.access import models as access_models  # noqa: F401
from lingomatch.modules.booking import models as booking_models  # noqa: F401
from lingomatch.modules.changefeed import models as changefeed_models  # noqa: F401
from lingomatch.modules.identity import models as identity_models  # noqa: F401
from lingomatch.modules.matches import models as matches_models  # noqa: F401
from lingomatch.modules.scheduling import models as scheduling_models  # noqa: F401
from lingomatch.modules.teachers import models as teachers_models  # noqa: F401
