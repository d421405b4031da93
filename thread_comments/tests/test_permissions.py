"""
Tests for thread_comments.permissions

Tests cover:
- Capability resolvers (flag based and django.contrib.auth based)
- Thread actions: show, new, create, close, reopen, subscribe, unsubscribe
- Comment actions: edit, update, delete, undelete, upvote, downvote, unvote
- Configuration switches for moderators, editing, deletion and voting
- Argument errors and authorize()
"""
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.contrib.auth.models import AnonymousUser, Permission
from django.utils import timezone

from thread_comments.conf import comments_settings
from thread_comments.exceptions import AuthorizationError
from thread_comments.models import Thread
from thread_comments.permissions import (
    NO_CAPABILITIES,
    Capabilities,
    auth_capabilities,
    authorize,
    can_perform,
    flag_capabilities,
    get_capabilities,
)
from thread_comments.tests.base import BaseThreadCommentsTestCase
from thread_comments.tests.models import Article

User = get_user_model()


# ============================================================================
# CAPABILITY RESOLVERS
# ============================================================================

class CapabilityResolverTests(BaseThreadCommentsTestCase):

    def test_flag_capabilities_default_to_false(self):
        self.assertEqual(flag_capabilities(self.creator, self.thread), Capabilities(False, False, False))

    def test_flag_capabilities_reads_user_attributes(self):
        self.grant(self.moderator, can_read=True, can_edit=True)

        caps = flag_capabilities(self.moderator, self.thread)

        self.assertTrue(caps.can_read)
        self.assertTrue(caps.can_edit)
        self.assertFalse(caps.is_admin)
        self.assertTrue(caps.is_moderator)

    def test_is_admin_counts_as_moderator(self):
        self.assertTrue(Capabilities(is_admin=True).is_moderator)
        self.assertFalse(Capabilities(can_read=True).is_moderator)

    def test_anonymous_user_has_no_capabilities(self):
        anonymous = AnonymousUser()
        anonymous.can_read = True

        self.assertEqual(get_capabilities(anonymous, self.thread), NO_CAPABILITIES)
        self.assertEqual(get_capabilities(None, self.thread), NO_CAPABILITIES)

    def test_auth_capabilities_for_regular_user(self):
        caps = auth_capabilities(self.other_user, self.thread)

        self.assertEqual(caps, Capabilities(can_read=True, can_edit=False, is_admin=False))

    def test_auth_capabilities_for_inactive_user(self):
        self.other_user.is_active = False

        self.assertFalse(auth_capabilities(self.other_user, self.thread).can_read)

    def test_auth_capabilities_with_moderate_permission(self):
        permission = Permission.objects.get(
            codename='moderate_thread',
            content_type__app_label='thread_comments'
        )
        self.moderator.user_permissions.add(permission)
        moderator = User.objects.get(pk=self.moderator.pk)

        caps = auth_capabilities(moderator, self.thread)

        self.assertTrue(caps.can_edit)
        self.assertFalse(caps.is_admin)

    def test_auth_capabilities_for_superuser(self):
        admin = User.objects.create_superuser('root', 'root@example.com', 'testpass123')

        caps = auth_capabilities(admin, self.thread)

        self.assertTrue(caps.can_read)
        self.assertTrue(caps.can_edit)
        self.assertTrue(caps.is_admin)

    def test_resolver_setting_is_used(self):
        with patch.object(comments_settings, 'CAPABILITY_RESOLVER', auth_capabilities):
            self.assertTrue(can_perform('show', self.other_user, self.thread))
            self.assertFalse(can_perform('close', self.other_user, self.thread))


# ============================================================================
# ARGUMENTS
# ============================================================================

class CanPerformArgumentTests(BaseThreadCommentsTestCase):

    def test_unknown_action_raises(self):
        with self.assertRaises(ValueError):
            can_perform('destroy', self.creator, self.thread)

    def test_comment_action_without_comment_raises(self):
        with self.assertRaises(ValueError):
            can_perform('edit', self.creator, self.thread)

    def test_comment_from_another_thread_is_denied(self):
        self.grant(self.creator)
        other_thread = Thread.objects.for_object(Article.objects.create(title='Other'))

        self.assertFalse(can_perform('edit', self.creator, other_thread, self.comment))

    def test_authorize_raises_on_denial(self):
        with self.assertRaises(AuthorizationError) as cm:
            authorize('show', self.other_user, self.thread)

        self.assertEqual(cm.exception.action, 'show')
        self.assertIn('show', cm.exception.message)

    def test_authorize_passes_when_allowed(self):
        self.grant(self.other_user)

        authorize('show', self.other_user, self.thread)


# ============================================================================
# THREAD ACTIONS
# ============================================================================

class ThreadActionPolicyTests(BaseThreadCommentsTestCase):

    def test_reader_can_show_and_subscribe(self):
        self.grant(self.other_user)

        for action in ('show', 'subscribe', 'unsubscribe'):
            self.assertTrue(can_perform(action, self.other_user, self.thread), action)

    def test_user_without_read_is_denied_everything(self):
        for action in ('show', 'new', 'create', 'close', 'reopen', 'subscribe', 'unsubscribe'):
            self.assertFalse(can_perform(action, self.other_user, self.thread), action)

    def test_anonymous_is_denied(self):
        self.assertFalse(can_perform('show', AnonymousUser(), self.thread))
        self.assertFalse(can_perform('create', None, self.thread))

    def test_reader_can_create_on_open_thread(self):
        self.grant(self.other_user)

        self.assertTrue(can_perform('new', self.other_user, self.thread))
        self.assertTrue(can_perform('create', self.other_user, self.thread))

    def test_nobody_can_create_on_closed_thread(self):
        self.grant(self.other_user)
        self.grant(self.moderator, can_edit=True, is_admin=True)
        self.thread.closed_at = timezone.now()

        self.assertFalse(can_perform('create', self.other_user, self.thread))
        self.assertFalse(can_perform('new', self.moderator, self.thread))

    def test_moderator_can_close_open_thread(self):
        self.grant(self.moderator, can_edit=True)

        self.assertTrue(can_perform('close', self.moderator, self.thread))
        self.assertFalse(can_perform('reopen', self.moderator, self.thread))

    def test_moderator_can_reopen_closed_thread(self):
        self.grant(self.moderator, can_edit=True)
        self.thread.closed_at = timezone.now()

        self.assertTrue(can_perform('reopen', self.moderator, self.thread))
        self.assertFalse(can_perform('close', self.moderator, self.thread))

    def test_reader_cannot_close(self):
        self.grant(self.other_user)

        self.assertFalse(can_perform('close', self.other_user, self.thread))

    def test_moderator_without_read_is_denied_by_default(self):
        self.grant(self.moderator, can_read=False, can_edit=True)

        self.assertFalse(can_perform('show', self.moderator, self.thread))
        self.assertFalse(can_perform('close', self.moderator, self.thread))

    def test_moderators_can_read_setting(self):
        self.grant(self.moderator, can_read=False, can_edit=True)

        with patch.object(comments_settings, 'MODERATORS_CAN_READ', True):
            self.assertTrue(can_perform('show', self.moderator, self.thread))
            self.assertTrue(can_perform('close', self.moderator, self.thread))


# ============================================================================
# EDIT / UPDATE
# ============================================================================

class EditPolicyTests(BaseThreadCommentsTestCase):

    def test_creator_can_edit(self):
        self.grant(self.creator)

        self.assertTrue(can_perform('edit', self.creator, self.thread, self.comment))
        self.assertTrue(can_perform('update', self.creator, self.thread, self.comment))

    def test_creator_without_read_cannot_edit(self):
        self.assertFalse(can_perform('edit', self.creator, self.thread, self.comment))

    def test_other_reader_cannot_edit(self):
        self.grant(self.other_user)

        self.assertFalse(can_perform('edit', self.other_user, self.thread, self.comment))

    def test_moderator_can_edit(self):
        self.grant(self.moderator, can_edit=True)

        self.assertTrue(can_perform('update', self.moderator, self.thread, self.comment))

    def test_admin_can_edit(self):
        self.grant(self.moderator, is_admin=True)

        self.assertTrue(can_perform('update', self.moderator, self.thread, self.comment))

    def test_moderator_limited_to_delete(self):
        self.grant(self.moderator, can_edit=True)

        with patch.object(comments_settings, 'MODERATOR_PERMISSIONS', 'delete'):
            self.assertFalse(can_perform('edit', self.moderator, self.thread, self.comment))

    def test_editing_disabled(self):
        self.grant(self.creator)

        with patch.object(comments_settings, 'COMMENT_EDITING', 'none'):
            self.assertFalse(can_perform('edit', self.creator, self.thread, self.comment))

    def test_editing_latest_only(self):
        self.grant(self.creator)
        newer = self.create_comment(body='Something else')

        with patch.object(comments_settings, 'COMMENT_EDITING', 'latest'):
            self.assertFalse(can_perform('edit', self.creator, self.thread, self.comment))
            self.assertTrue(can_perform('edit', self.creator, self.thread, newer))

    def test_deleted_comment_can_still_be_edited(self):
        self.grant(self.creator)
        self.comment.deleted_at = timezone.now()

        self.assertTrue(can_perform('edit', self.creator, self.thread, self.comment))


# ============================================================================
# DELETE / UNDELETE
# ============================================================================

class DeletePolicyTests(BaseThreadCommentsTestCase):

    def test_creator_can_delete(self):
        self.grant(self.creator)

        self.assertTrue(can_perform('delete', self.creator, self.thread, self.comment))

    def test_other_reader_cannot_delete(self):
        self.grant(self.other_user)

        self.assertFalse(can_perform('delete', self.other_user, self.thread, self.comment))

    def test_moderator_can_delete(self):
        self.grant(self.moderator, can_edit=True)

        self.assertTrue(can_perform('delete', self.moderator, self.thread, self.comment))

        with patch.object(comments_settings, 'MODERATOR_PERMISSIONS', 'delete'):
            self.assertTrue(can_perform('delete', self.moderator, self.thread, self.comment))

        with patch.object(comments_settings, 'MODERATOR_PERMISSIONS', 'none'):
            self.assertFalse(can_perform('delete', self.moderator, self.thread, self.comment))

    def test_deleted_comment_cannot_be_deleted_again(self):
        self.grant(self.creator)
        self.comment.delete_by(self.creator)

        self.assertFalse(can_perform('delete', self.creator, self.thread, self.comment))

    def test_deletion_latest_only(self):
        self.grant(self.creator)
        newer = self.create_comment(body='Something else')

        with patch.object(comments_settings, 'COMMENT_DELETION', 'latest'):
            self.assertFalse(can_perform('delete', self.creator, self.thread, self.comment))
            self.assertTrue(can_perform('delete', self.creator, self.thread, newer))

    def test_undelete_requires_deleted_comment(self):
        self.grant(self.creator)

        self.assertFalse(can_perform('undelete', self.creator, self.thread, self.comment))

    def test_creator_can_undelete_own_deletion(self):
        self.grant(self.creator)
        self.comment.delete_by(self.creator)

        self.assertTrue(can_perform('undelete', self.creator, self.thread, self.comment))

    def test_creator_cannot_undelete_moderator_deletion(self):
        self.grant(self.creator)
        self.grant(self.moderator, can_edit=True)
        self.comment.delete_by(self.moderator)

        self.assertFalse(can_perform('undelete', self.creator, self.thread, self.comment))
        self.assertTrue(can_perform('undelete', self.moderator, self.thread, self.comment))

    def test_other_reader_cannot_undelete(self):
        self.grant(self.other_user)
        self.comment.delete_by(self.creator)

        self.assertFalse(can_perform('undelete', self.other_user, self.thread, self.comment))


# ============================================================================
# VOTING
# ============================================================================

class VotePolicyTests(BaseThreadCommentsTestCase):

    def test_creator_cannot_vote_on_own_comment(self):
        self.grant(self.creator)

        for action in ('upvote', 'downvote', 'unvote'):
            self.assertFalse(can_perform(action, self.creator, self.thread, self.comment), action)

    def test_reader_can_vote(self):
        self.grant(self.other_user)

        for action in ('upvote', 'downvote', 'unvote'):
            self.assertTrue(can_perform(action, self.other_user, self.thread, self.comment), action)

    def test_user_without_read_cannot_vote(self):
        self.assertFalse(can_perform('upvote', self.other_user, self.thread, self.comment))

    def test_upvotes_only(self):
        self.grant(self.other_user)

        with patch.object(comments_settings, 'COMMENT_VOTING', 'up'):
            self.assertTrue(can_perform('upvote', self.other_user, self.thread, self.comment))
            self.assertTrue(can_perform('unvote', self.other_user, self.thread, self.comment))
            self.assertFalse(can_perform('downvote', self.other_user, self.thread, self.comment))

    def test_voting_disabled(self):
        self.grant(self.other_user)

        with patch.object(comments_settings, 'COMMENT_VOTING', 'none'):
            for action in ('upvote', 'downvote', 'unvote'):
                self.assertFalse(can_perform(action, self.other_user, self.thread, self.comment), action)
