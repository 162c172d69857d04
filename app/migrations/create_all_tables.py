"""
Create the catalog tables outside the API process:
    python -m app.migrations.create_all_tables
"""
from typing import List

from app.database import Base, init_db


def create_tables() -> List[str]:
    """Run init_db and report the tables it manages"""
    init_db()
    table_names = [table.name for table in Base.metadata.sorted_tables]
    print("Tables ready:")
    for table_name in table_names:
        print(f"   - {table_name}")
    return table_names


if __name__ == "__main__":
    create_tables()
