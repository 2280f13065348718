"""
Static yoga content: poses and guided routines
"""
from typing import List, Optional

MEDIA_BASE_URL = "https://example.com"


def _pose(pose_id, name, sanskrit, category, difficulty, duration, benefits, instructions, slug):
    return {
        "id": pose_id,
        "name": name,
        "sanskrit": sanskrit,
        "category": category,
        "difficulty": difficulty,
        "duration": duration,  # seconds
        "benefits": benefits,
        "instructions": instructions,
        "image": f"{MEDIA_BASE_URL}/{slug}.jpg",
        "video": f"{MEDIA_BASE_URL}/{slug}-video.mp4",
    }


YOGA_POSES = [
    _pose(
        1, "Mountain Pose (Tadasana)", "Tadasana", "standing", "beginner", 30,
        ["Improves posture", "Strengthens thighs and core", "Increases awareness"],
        [
            "Stand with feet together, arms at sides",
            "Lift and spread toes, then place them back down",
            "Engage thigh muscles and lift kneecaps",
            "Draw in lower belly and lift chest",
            "Relax shoulders and extend arms down",
            "Hold for 30 seconds to 1 minute",
        ],
        "mountain-pose",
    ),
    _pose(
        2, "Downward-Facing Dog (Adho Mukha Svanasana)", "Adho Mukha Svanasana", "inversion", "beginner", 60,
        ["Strengthens arms and legs", "Stretches shoulders and hamstrings", "Calms the mind"],
        [
            "Start on hands and knees",
            "Lift hips up and back",
            "Press hands into mat and lift hips",
            "Straighten legs as much as possible",
            "Keep head between arms",
            "Hold for 1-3 minutes",
        ],
        "downward-dog",
    ),
    _pose(
        3, "Warrior I (Virabhadrasana I)", "Virabhadrasana I", "standing", "intermediate", 45,
        ["Strengthens legs and core", "Opens chest and shoulders", "Improves balance"],
        [
            "Step one foot back into a lunge",
            "Turn back foot out 45 degrees",
            "Bend front knee to 90 degrees",
            "Lift arms overhead",
            "Square hips to front",
            "Hold for 30-60 seconds each side",
        ],
        "warrior-1",
    ),
    _pose(
        4, "Tree Pose (Vrksasana)", "Vrksasana", "balancing", "beginner", 30,
        ["Improves balance", "Strengthens legs", "Focuses the mind"],
        [
            "Stand on one leg",
            "Place other foot on inner thigh or calf",
            "Bring hands to prayer position",
            "Focus on a point ahead",
            "Keep standing leg strong",
            "Hold for 30-60 seconds each side",
        ],
        "tree-pose",
    ),
    _pose(
        5, "Child's Pose (Balasana)", "Balasana", "restorative", "beginner", 120,
        ["Relieves back pain", "Calms the mind", "Stretches hips and thighs"],
        [
            "Kneel on mat with big toes touching",
            "Sit back on heels",
            "Fold forward, extending arms",
            "Rest forehead on mat",
            "Relax and breathe deeply",
            "Hold for 1-3 minutes",
        ],
        "childs-pose",
    ),
    _pose(
        6, "Cobra Pose (Bhujangasana)", "Bhujangasana", "backbend", "beginner", 30,
        ["Strengthens back muscles", "Opens chest", "Improves posture"],
        [
            "Lie face down on mat",
            "Place hands under shoulders",
            "Press into hands and lift chest",
            "Keep pelvis on mat",
            "Look forward or slightly up",
            "Hold for 15-30 seconds",
        ],
        "cobra-pose",
    ),
    _pose(
        7, "Bridge Pose (Setu Bandhasana)", "Setu Bandhasana", "backbend", "beginner", 45,
        ["Strengthens back and glutes", "Opens chest", "Calms the mind"],
        [
            "Lie on back with knees bent",
            "Place feet hip-width apart",
            "Press into feet and lift hips",
            "Interlace hands under back",
            "Roll shoulders under",
            "Hold for 30-60 seconds",
        ],
        "bridge-pose",
    ),
    _pose(
        8, "Seated Forward Bend (Paschimottanasana)", "Paschimottanasana", "forward-bend", "intermediate", 60,
        ["Stretches hamstrings", "Calms the mind", "Relieves stress"],
        [
            "Sit with legs extended",
            "Fold forward from hips",
            "Reach for feet or ankles",
            "Keep back straight",
            "Breathe deeply",
            "Hold for 1-3 minutes",
        ],
        "seated-forward-bend",
    ),
]


def _step(pose_index: int, duration: int) -> dict:
    return {"pose": YOGA_POSES[pose_index], "duration": duration}


YOGA_ROUTINES = [
    {
        "id": 1,
        "name": "Morning Flow",
        "duration": 15,  # minutes
        "difficulty": "beginner",
        "description": "A gentle morning routine to wake up your body and mind",
        "poses": [_step(0, 30), _step(1, 60), _step(4, 120), _step(5, 30), _step(4, 60)],
    },
    {
        "id": 2,
        "name": "Strength Builder",
        "duration": 30,
        "difficulty": "intermediate",
        "description": "Build strength and improve balance",
        "poses": [_step(0, 30), _step(2, 45), _step(3, 30), _step(6, 45), _step(1, 60), _step(4, 60)],
    },
    {
        "id": 3,
        "name": "Relaxation Sequence",
        "duration": 20,
        "difficulty": "beginner",
        "description": "A calming sequence to reduce stress and tension",
        "poses": [_step(4, 120), _step(6, 45), _step(7, 120), _step(4, 120)],
    },
]


def filter_poses(
    category: Optional[str] = None,
    difficulty: Optional[str] = None,
    limit: Optional[int] = None
) -> List[dict]:
    poses = [
        pose for pose in YOGA_POSES
        if (not category or pose["category"] == category)
        and (not difficulty or pose["difficulty"] == difficulty)
    ]
    if limit is not None:
        poses = poses[:limit]
    return poses


def find_pose(pose_id: int) -> Optional[dict]:
    return next((pose for pose in YOGA_POSES if pose["id"] == pose_id), None)


def find_routine(routine_id: int) -> Optional[dict]:
    return next((routine for routine in YOGA_ROUTINES if routine["id"] == routine_id), None)
