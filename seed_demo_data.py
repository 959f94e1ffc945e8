from pharmapos.database import SessionLocal, init_db
from pharmapos.services import ensure_default_admin, seed_demo_data


def main():
    init_db()
    db = SessionLocal()
    try:
        if ensure_default_admin(db):
            print("Created default admin user")
        created = seed_demo_data(db)
        print(f"Demo data seeded: {created}")
    finally:
        db.close()

if __name__ == "__main__":
    main()
