import os
import warnings

# Ignore warnings from app.shared
warnings.filterwarnings("ignore", category=DeprecationWarning, module="app.shared.*")

# Integrations run as stubs unless a test builds its own config
os.environ.setdefault("DEMO_MODE", "true")

# Import database fixtures so they are available to all tests
from tests.fixtures.mongo_fixtures import *  # noqa: E402, F403
from tests.fixtures.event_fixtures import *  # noqa: E402, F403
