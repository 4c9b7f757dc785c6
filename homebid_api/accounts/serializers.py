from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoPasswordValidationError


from .models import CustomUser, Contractor


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    Serializer for user login and token generation.

    Fields:
        - email (required)
        - password (required)
    Rejects deactivated accounts before issuing tokens.
    """
    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['email'] = user.email
        token['user_type'] = user.user_type
        return token

    def validate(self, attrs):
        user = CustomUser.objects.filter(email=attrs.get('email')).first()
        if user is not None and not user.is_active:
            raise AuthenticationFailed("Your account is deactivated.")

        return super().validate(attrs)


class UserSummarySerializer(serializers.ModelSerializer):
    """
    Lightweight user reference embedded in bid, message and project payloads.
    """
    firstName = serializers.CharField(source='first_name', read_only=True)
    lastName = serializers.CharField(source='last_name', read_only=True)
    userType = serializers.CharField(source='user_type', read_only=True)
    phone = serializers.CharField(source='phone_number', read_only=True)
    profileImage = serializers.CharField(source='profile_image', read_only=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'firstName', 'lastName', 'userType', 'phone', 'location', 'profileImage']
        read_only_fields = fields


class RegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for user registration.

    Fields :
        required: email, password, confirmPassword, firstName, lastName, userType
        optional: phone, location, country
    Validates password confirmation and strength, then creates the user.
    """
    password = serializers.CharField(required=True, write_only=True)
    confirmPassword = serializers.CharField(required=True, write_only=True)
    firstName = serializers.CharField(source='first_name')
    lastName = serializers.CharField(source='last_name')
    userType = serializers.ChoiceField(source='user_type', choices=CustomUser.USER_TYPE_CHOICES)
    phone = serializers.CharField(source='phone_number', required=False, allow_blank=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'email', 'password', 'confirmPassword', 'firstName', 'lastName', 'userType', 'phone', 'location', 'country']
        read_only_fields = ['id']

    def validate(self, attrs):
        if attrs['password'] != attrs['confirmPassword']:
            raise serializers.ValidationError("Passwords do not match.")
        prospective_user = CustomUser(
            email=attrs.get('email'),
            first_name=attrs.get('first_name'),
            last_name=attrs.get('last_name'),
            user_type=attrs.get('user_type'),
        )

        try:
            validate_password(attrs['password'], user=prospective_user)
        except DjangoPasswordValidationError as exc:
            raise serializers.ValidationError({'password': list(exc.messages)})

        return attrs

    def create(self, validated_data):
        validated_data.pop('confirmPassword')
        return CustomUser.objects.create_user(**validated_data)


class UserProfileSerializer(serializers.ModelSerializer):
    """
    Serializer for the current user's profile.

    The 'id', 'email' and 'userType' fields are read-only.
    """
    firstName = serializers.CharField(source='first_name', required=False)
    lastName = serializers.CharField(source='last_name', required=False)
    userType = serializers.CharField(source='user_type', read_only=True)
    phone = serializers.CharField(source='phone_number', required=False, allow_blank=True)
    profileImage = serializers.URLField(source='profile_image', required=False, allow_blank=True)

    class Meta:
        model = CustomUser
        fields = ('id', 'email', 'firstName', 'lastName', 'userType', 'phone', 'location', 'profileImage', 'country')
        read_only_fields = ('id', 'email')


class ContractorSerializer(serializers.ModelSerializer):
    """
    Contractor profile with its owning user embedded.

    The owning user is always the authenticated contractor; rating and
    review count are maintained by the platform.
    """
    userId = serializers.IntegerField(source='user_id', read_only=True)
    companyName = serializers.CharField(source='company_name')
    reviewCount = serializers.IntegerField(source='review_count', read_only=True)
    user = UserSummarySerializer(read_only=True)

    class Meta:
        model = Contractor
        fields = [
            'id', 'userId', 'companyName', 'description', 'specialties', 'experience',
            'rating', 'reviewCount', 'portfolio', 'licenses', 'insurance', 'user',
        ]
        read_only_fields = ['id', 'rating']

    def validate_specialties(self, value):
        if not all(isinstance(item, str) for item in value):
            raise serializers.ValidationError("Specialties must be a list of strings.")
        return value

    def validate(self, attrs):
        request = self.context.get('request')
        if self.instance is None and request is not None:
            if not request.user.is_contractor:
                raise serializers.ValidationError("Only contractor accounts can create a contractor profile.")
            if Contractor.objects.filter(user=request.user).exists():
                raise serializers.ValidationError("A contractor profile already exists for this account.")
        return attrs

    def create(self, validated_data):
        return Contractor.objects.create(user=self.context['request'].user, **validated_data)


class LogoutSerializer(serializers.Serializer):
    refresh = serializers.CharField()
