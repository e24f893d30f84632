# src/apps/academy/api/urls.py
"""
Academy API URLs
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from rest_framework_nested import routers

from .views import (
    CourseViewSet,
    CourseModuleViewSet,
    LessonViewSet,
    EnrollmentViewSet,
    ExamViewSet,
    ExamQuestionViewSet,
    PracticalViewSet,
    RecruitmentSessionViewSet,
)

router = DefaultRouter()
router.register(r'courses', CourseViewSet, basename='course')
router.register(r'lessons', LessonViewSet, basename='lesson')
router.register(r'enrollments', EnrollmentViewSet, basename='enrollment')
router.register(r'exams', ExamViewSet, basename='exam')
router.register(r'practicals', PracticalViewSet, basename='practical')
router.register(r'recruitment/sessions', RecruitmentSessionViewSet, basename='recruitment-session')

courses_router = routers.NestedDefaultRouter(router, r'courses', lookup='course')
courses_router.register(r'modules', CourseModuleViewSet, basename='course-module')

exams_router = routers.NestedDefaultRouter(router, r'exams', lookup='exam')
exams_router.register(r'questions', ExamQuestionViewSet, basename='exam-question')

urlpatterns = [
    path('', include(router.urls)),
    path('', include(courses_router.urls)),
    path('', include(exams_router.urls)),
]

# API URL Patterns Summary:
#
# Courses:
#   GET/POST    /api/v1/courses/
#   GET/PUT/DEL /api/v1/courses/{id}/
#   POST        /api/v1/courses/{id}/enroll/
#   GET/POST    /api/v1/courses/{id}/modules/
#   GET/POST    /api/v1/lessons/
#
# Enrollments:
#   GET         /api/v1/enrollments/
#   POST        /api/v1/enrollments/{id}/complete-lesson/
#
# Exams:
#   GET/POST    /api/v1/exams/
#   GET/PUT/DEL /api/v1/exams/{id}/
#   POST        /api/v1/exams/{id}/submit/
#   GET         /api/v1/exams/{id}/attempts-remaining/
#   GET/POST    /api/v1/exams/{id}/questions/
#
# Practicals:
#   GET/POST    /api/v1/practicals/
#   POST        /api/v1/practicals/{id}/result/
#
# Recruitment:
#   GET         /api/v1/recruitment/sessions/
#   GET         /api/v1/recruitment/sessions/{id}/
