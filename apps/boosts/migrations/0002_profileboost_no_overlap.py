from django.db import migrations


def add_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != 'postgresql':
        return
    schema_editor.execute('CREATE EXTENSION IF NOT EXISTS btree_gist;')
    schema_editor.execute(
        """
        ALTER TABLE profile_boosts
        ADD CONSTRAINT profile_boosts_no_overlap
        EXCLUDE USING gist (
            user_id WITH =,
            tstzrange(started_at, expires_at, '[)') WITH &&
        );
        """
    )


def drop_exclusion_constraint(apps, schema_editor):
    if schema_editor.connection.vendor != 'postgresql':
        return
    schema_editor.execute('ALTER TABLE profile_boosts DROP CONSTRAINT IF EXISTS profile_boosts_no_overlap;')


class Migration(migrations.Migration):

    dependencies = [
        ('boosts', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(add_exclusion_constraint, drop_exclusion_constraint),
    ]
