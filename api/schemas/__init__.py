"""
API schemas package. Import from submodules or from this package.

Example:
    from api.schemas import LeaderboardResponse, SubjectResponse
    from api.schemas.progress_schemas import LeaderboardResponse
"""

from api.schemas.auth_schemas import (
    AuthTokenPayload,
    LoginRequest,
    LoginResponse,
    LogoutResponse,
    RegisterRequest,
    RegisterResponse,
)
from api.schemas.user_schemas import User
from api.schemas.catalog_schemas import (
    UniversityResponse,
    UniversityListResponse,
    DepartmentResponse,
    DepartmentListResponse,
    SemesterResponse,
    SemesterListResponse,
    SubjectResponse,
    SubjectListResponse,
)
from api.schemas.material_schemas import (
    GateQuestionPayload,
    QuizQuestionPublic,
    QuizResponse,
    SubjectMaterialsResponse,
)
from api.schemas.profile_schemas import ProfileResponse, ProfileUpdateRequest
from api.schemas.progress_schemas import (
    ProgressEventRequest,
    QuizSubmissionRequest,
    ProgressRecordResponse,
    ProgressListResponse,
    EventOutcomeResponse,
    AchievementResponse,
    AchievementListResponse,
    LeaderboardEntryResponse,
    LeaderboardResponse,
    TotalXPResponse,
)

__all__ = [
    "AuthTokenPayload",
    "LoginRequest",
    "LoginResponse",
    "LogoutResponse",
    "RegisterRequest",
    "RegisterResponse",
    "User",
    "UniversityResponse",
    "UniversityListResponse",
    "DepartmentResponse",
    "DepartmentListResponse",
    "SemesterResponse",
    "SemesterListResponse",
    "SubjectResponse",
    "SubjectListResponse",
    "ProfileResponse",
    "ProfileUpdateRequest",
    "GateQuestionPayload",
    "QuizQuestionPublic",
    "QuizResponse",
    "SubjectMaterialsResponse",
    "ProgressEventRequest",
    "QuizSubmissionRequest",
    "ProgressRecordResponse",
    "ProgressListResponse",
    "EventOutcomeResponse",
    "AchievementResponse",
    "AchievementListResponse",
    "LeaderboardEntryResponse",
    "LeaderboardResponse",
    "TotalXPResponse",
]
