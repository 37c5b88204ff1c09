#!/usr/bin/env python3
"""
Initialize database tables
"""

from sqlalchemy import inspect
from database import create_tables, engine

def init_database():
    """Initialize database with all tables"""
    print("🗄️  Initializing database...")
    
    create_tables()
    
    print("✅ Database initialized successfully!")
    print(f"📍 Database location: {engine.url}")
    
    inspector = inspect(engine)
    tables = inspector.get_table_names()
    
    print(f"📊 {len(tables)} tables:")
    for table in tables:
        print(f"   - {table}")

if __name__ == "__main__":
    init_database()
