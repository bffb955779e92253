import sys
from pathlib import Path

# Run against src/ without requiring an editable install
SRC = Path(__file__).resolve().parents[1] / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))
