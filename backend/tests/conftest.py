"""
Pytest configuration for backend tests.

Adds the backend directory to Python path so imports like
'from refund_service.xxx import ...' work without installing the package.
"""
import sys
from pathlib import Path

# Add backend directory to path
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))
