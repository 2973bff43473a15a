"""
===========================
APP: SQL Server Backup Runner
===========================

What it does: 
- Backs up SQL Server databases listed in `database.txt` (or all online user databases) into the folder in line 1 of `path.txt`.
- Copies every backup file to the folder in line 2 of `path.txt`, while the next database is being backed up.
- Logs every step to `Log.txt` in the backup folder and to the console.
- Designed to be run on a schedule (e.g. Windows Task Scheduler) on the SQL Server host.
"""
from sqlbackup import start_app


if __name__ == "__main__":
    raise SystemExit(start_app())
