#!/usr/bin/env python3
"""
Seed data script for development
"""
import asyncio
import sys
from pathlib import Path
import random

# Add the project root to the Python path
current_dir = Path(__file__).parent
root_dir = current_dir.parent
sys.path.insert(0, str(root_dir))

# Posts are scattered around these two cities
CITIES = {
    "Beirut": (33.8938, 35.5018),
    "Tripoli": (34.4361, 35.8497),
}

NEIGHBOURHOODS = {
    "Beirut": ["Hamra", "Achrafieh", "Mar Mikhael", "Verdun", "Gemmayzeh"],
    "Tripoli": ["Mina", "Tell", "Abou Samra", "Dam w Farz"],
}

ITEMS = [
    ("electronics", "iPhone", "Black phone with a cracked case"),
    ("electronics", "laptop", "Grey laptop in a blue sleeve"),
    ("documents", "passport", "Lebanese passport in a leather cover"),
    ("documents", "ID card", "National ID card"),
    ("jewelry", "gold ring", "Thin gold ring with an engraving"),
    ("clothing", "jacket", "Black denim jacket, size M"),
    ("car", "car keys", "Toyota keys with a red keychain"),
    ("furniture", "office chair", "Black office chair left on the sidewalk"),
    ("person", "grandfather", "Elderly man with a grey coat, answers to Abu Sami"),
    ("other", "cat", "Orange cat with a white tail"),
]

async def seed_users(count: int = 10) -> list:
    """Seed users"""
    from lostfound.db.session import get_db
    from lostfound.models.user import User
    from lostfound.models.enums import Language
    from sqlalchemy import select

    print(f"👥 Seeding {count} users...")

    first_names = ["Rami", "Nour", "Karim", "Maya", "Hadi", "Lara", "Ziad", "Rana", "Omar", "Yara"]
    last_names = ["Haddad", "Khoury", "Nassar", "Saad", "Aoun", "Frem", "Chami", "Gemayel", "Harb", "Salameh"]

    users = []
    async for db in get_db():
        for i in range(count):
            first = random.choice(first_names)
            last = random.choice(last_names)
            email = f"{first.lower()}.{last.lower()}{i}@example.com"

            stmt = select(User).where(User.email == email)
            result = await db.execute(stmt)
            existing = result.scalar_one_or_none()

            if existing:
                users.append(existing)
                continue

            user = User(
                email=email,
                first_name=first,
                last_name=last,
                phone=f"+961 {random.randint(3, 81)} {random.randint(100000, 999999)}",
                preferred_language=random.choice(list(Language)),
                is_verified=random.random() > 0.3,
            )
            db.add(user)
            users.append(user)

        try:
            await db.commit()
        except Exception as e:
            await db.rollback()
            print(f"⚠️  Error creating users: {e}")
            return []

    print(f"✅ Seeded {len(users)} users")
    return users

async def seed_posts(users: list, count_per_user: int = 3) -> list:
    """Seed lost and found posts around Beirut and Tripoli"""
    from lostfound.db.session import get_db
    from lostfound.models.enums import PostType, PostCategory
    from lostfound.schemas.post_schema import PostCreate, PostImageCreate
    from lostfound.services.post_service import PostService

    print(f"📝 Seeding posts ({count_per_user} per user)...")

    posts = []
    async for db in get_db():
        post_service = PostService(db)

        for user in users:
            for _ in range(count_per_user):
                city = random.choice(list(CITIES))
                latitude, longitude = CITIES[city]
                category, item, description = random.choice(ITEMS)
                post_type = random.choice(list(PostType))
                with_coordinates = random.random() > 0.2

                post_data = PostCreate(
                    title=f"{post_type.value.capitalize()} {item}",
                    description=description,
                    type=post_type,
                    category=PostCategory(category),
                    location_text=f"{random.choice(NEIGHBOURHOODS[city])}, {city}",
                    latitude=latitude + random.uniform(-0.05, 0.05) if with_coordinates else None,
                    longitude=longitude + random.uniform(-0.05, 0.05) if with_coordinates else None,
                    contact_info=user.phone or user.email,
                    images=[
                        PostImageCreate(
                            image_url=f"https://picsum.photos/800/600?random={random.randint(1, 1000)}",
                            alt_text=item,
                        )
                        for _ in range(random.randint(0, 3))
                    ],
                )

                try:
                    post = await post_service.create_post(user.id, post_data)
                    posts.append(post)
                except Exception as e:
                    print(f"⚠️  Error creating post for user {user.id}: {e}")

    print(f"✅ Created {len(posts)} posts")
    return posts

async def seed_conversations(users: list, posts: list, count: int = 10) -> None:
    """Open conversations between post owners and other users"""
    from lostfound.db.session import get_db
    from lostfound.services.conversation_service import ConversationService
    from lostfound.services.message_service import MessageService

    print(f"💬 Seeding {count} conversations...")

    openers = [
        "Hi, I think I saw this yesterday.",
        "Is this still missing?",
        "I found something that matches your description.",
        "Can you share more details?",
    ]
    replies = [
        "Yes! Where did you see it?",
        "Thank you so much, can we meet?",
        "It has a small scratch on the back.",
        "Still missing, any help is appreciated.",
    ]

    created = 0
    async for db in get_db():
        conversation_service = ConversationService(db)
        message_service = MessageService(db)

        for post in random.sample(posts, min(count, len(posts))):
            others = [user for user in users if user.id != post.user_id]
            if not others:
                continue
            visitor = random.choice(others)

            try:
                conversation = await conversation_service.get_or_create(post.id, visitor.id, post.user_id)
                await message_service.append(conversation.id, visitor.id, random.choice(openers))
                await message_service.append(conversation.id, post.user_id, random.choice(replies))
                created += 1
            except Exception as e:
                print(f"⚠️  Error creating conversation on post {post.id}: {e}")

    print(f"✅ Created {created} conversations")

async def seed_all() -> None:
    """Seed all data"""
    print("🌱 Starting database seeding...")

    users = await seed_users(10)
    posts = await seed_posts(users, 3)
    await seed_conversations(users, posts, 10)

    print("🎉 Database seeding completed!")

async def clear_all_data(confirm: bool = False) -> None:
    """Delete every row, children first"""
    if not confirm:
        print("⚠️  WARNING: This will delete ALL data from the database!")
        print("   Use --confirm flag to proceed")
        return

    from lostfound.db.session import engine
    from lostfound.models import Base

    print("🧹 Clearing all data...")

    async with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(table.delete())
            print(f"  Cleared {table.name}")

    print("✅ All data cleared")

def main() -> None:
    """Main entry point"""
    import argparse

    parser = argparse.ArgumentParser(description="Database Seeding")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("all", help="Seed all data")

    users_parser = subparsers.add_parser("users", help="Seed users only")
    users_parser.add_argument("--count", type=int, default=10, help="Number of users")

    clear_parser = subparsers.add_parser("clear", help="Clear all data")
    clear_parser.add_argument("--confirm", action="store_true", help="Confirm clear")

    reset_parser = subparsers.add_parser("reset", help="Clear and reseed")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm reset")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "all":
            asyncio.run(seed_all())

        elif args.command == "users":
            asyncio.run(seed_users(args.count))

        elif args.command == "clear":
            asyncio.run(clear_all_data(args.confirm))

        elif args.command == "reset":
            if not args.confirm:
                print("⚠️  WARNING: This will delete ALL data from the database!")
                print("   Use --confirm flag to proceed")
                return

            asyncio.run(clear_all_data(True))
            asyncio.run(seed_all())

    except KeyboardInterrupt:
        print("\n⚠️  Operation cancelled by user")
        sys.exit(1)
    except Exception as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
