#!/usr/bin/env python3
"""
Re-derive the stored status of all website projects from their website data.
Run with: python scripts/sync_project_status.py [--dry-run]
"""
import argparse
import os
import sys

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from agency.db import SessionLocal
from agency.models import Project, ProjectType
from agency.services.project_service import sync_all_project_statuses
from agency.status.project_status import derive_project_status


def main():
    parser = argparse.ArgumentParser(description="Sync stored project status with derived status")
    parser.add_argument("--dry-run", action="store_true", help="Only print the changes")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        if args.dry_run:
            projects = db.query(Project).filter(Project.type == ProjectType.WEBSITE).all()
            changes = 0
            for project in projects:
                derived = derive_project_status(project.website)
                if project.status != derived:
                    changes += 1
                    print(f"{project.id}: {project.status.value} -> {derived.value}")
            print(f"{changes} of {len(projects)} projects would change")
        else:
            changed = sync_all_project_statuses(db)
            print(f"{changed} projects updated")
    finally:
        db.close()


if __name__ == "__main__":
    main()
