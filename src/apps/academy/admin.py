from django.contrib import admin

from .models import (
    Course,
    CourseModule,
    Lesson,
    Enrollment,
    Exam,
    ExamQuestion,
    ExamAttempt,
    Practical,
    RecruitmentExamSession,
)


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ['title', 'category', 'is_published', 'is_required', 'sort_order']
    list_filter = ['is_published', 'is_required']


@admin.register(CourseModule)
class CourseModuleAdmin(admin.ModelAdmin):
    list_display = ['title', 'course', 'sort_order']


@admin.register(Lesson)
class LessonAdmin(admin.ModelAdmin):
    list_display = ['title', 'module', 'sort_order']


@admin.register(Enrollment)
class EnrollmentAdmin(admin.ModelAdmin):
    list_display = ['pilot', 'course', 'status', 'completed_at']
    list_filter = ['status']


class ExamQuestionInline(admin.TabularInline):
    model = ExamQuestion
    extra = 0


@admin.register(Exam)
class ExamAdmin(admin.ModelAdmin):
    list_display = ['title', 'passing_score', 'max_attempts', 'is_published']
    inlines = [ExamQuestionInline]


@admin.register(ExamAttempt)
class ExamAttemptAdmin(admin.ModelAdmin):
    list_display = ['exam', 'user_id', 'score', 'passed', 'completed_at']
    list_filter = ['passed']


@admin.register(Practical)
class PracticalAdmin(admin.ModelAdmin):
    list_display = ['pilot', 'status', 'scheduled_at', 'completed_at']
    list_filter = ['status']


@admin.register(RecruitmentExamSession)
class RecruitmentExamSessionAdmin(admin.ModelAdmin):
    list_display = ['discord_user_id', 'preferred_pid', 'passed', 'score', 'completed_at', 'created_at']
    search_fields = ['discord_user_id', 'preferred_pid']
    readonly_fields = ['token']
