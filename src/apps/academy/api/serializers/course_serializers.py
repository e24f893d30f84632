# src/apps/academy/api/serializers/course_serializers.py
"""
Course Serializers
"""

from rest_framework import serializers

from ...models import Course, CourseModule, Lesson, Enrollment
from ...services import CourseService


class LessonSerializer(serializers.ModelSerializer):

    class Meta:
        model = Lesson
        fields = ['id', 'module', 'title', 'content', 'video_url', 'sort_order']


class CourseModuleSerializer(serializers.ModelSerializer):
    lessons = LessonSerializer(many=True, read_only=True)

    class Meta:
        model = CourseModule
        fields = ['id', 'course', 'title', 'description', 'sort_order', 'lessons']
        read_only_fields = ['course']


class CourseListSerializer(serializers.ModelSerializer):
    lesson_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Course
        fields = [
            'id',
            'title',
            'category',
            'thumbnail_url',
            'is_published',
            'is_required',
            'sort_order',
            'lesson_count',
        ]


class CourseDetailSerializer(serializers.ModelSerializer):
    modules = CourseModuleSerializer(many=True, read_only=True)
    lesson_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = Course
        fields = [
            'id',
            'title',
            'description',
            'category',
            'thumbnail_url',
            'is_published',
            'is_required',
            'sort_order',
            'lesson_count',
            'modules',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class EnrollmentSerializer(serializers.ModelSerializer):
    course_title = serializers.CharField(source='course.title', read_only=True)
    progress = serializers.SerializerMethodField()
    completed_lessons = serializers.SerializerMethodField()

    class Meta:
        model = Enrollment
        fields = [
            'id',
            'course',
            'course_title',
            'pilot',
            'status',
            'progress',
            'completed_lessons',
            'completed_at',
            'created_at',
        ]
        read_only_fields = ['id', 'pilot', 'status', 'completed_at', 'created_at']

    def get_progress(self, obj) -> int:
        return CourseService.progress(obj)

    def get_completed_lessons(self, obj):
        return [str(lesson_id) for lesson_id in obj.lesson_progress.values_list('lesson_id', flat=True)]


class CompleteLessonSerializer(serializers.Serializer):
    lesson_id = serializers.PrimaryKeyRelatedField(queryset=Lesson.objects.select_related('module'))
