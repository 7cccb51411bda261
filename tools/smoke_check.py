import sys
from pathlib import Path

# Ensure project src is on sys.path
repo_root = Path(__file__).resolve().parents[1]
src_dir = repo_root / 'src'
if str(src_dir) not in sys.path:
    sys.path.insert(0, str(src_dir))

from Pianoacademy.app_init import initialize_app  # noqa: E402
from Pianoacademy.config import DataConfig, DataMode  # noqa: E402

if __name__ == '__main__':
    print('Running smoke check: mock mode, fetch_students()...')
    app = initialize_app(DataConfig(mode=DataMode.MOCK, mock_network_delay=0))
    students = app.stores.students.fetch_students()
    print(f'{len(students)} students loaded.')
    print('Smoke check completed.')
