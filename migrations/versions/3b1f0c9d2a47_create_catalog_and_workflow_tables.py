"""create_catalog_and_workflow_tables

Revision ID: 3b1f0c9d2a47
Revises:
Create Date: 2026-10-19 09:12:41.508113

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '3b1f0c9d2a47'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]


def upgrade() -> None:
    connection = op.get_bind()
    inspector = sa.inspect(connection)
    existing_tables = inspector.get_table_names()

    if 'node_definitions' not in existing_tables:
        op.create_table(
            'node_definitions',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('node_type', sa.String(255), nullable=False, unique=True),
            sa.Column('display_name', sa.String(255), nullable=False),
            sa.Column('category', sa.String(50), nullable=False, server_default='general'),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('icon', sa.String(50), nullable=True),
            sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
            sa.Column('deprecated', sa.Boolean(), nullable=False, server_default='false'),
            sa.Column('replaced_by', sa.String(255), nullable=True),
            *_timestamps(),
        )
        op.create_index('idx_node_definitions_category', 'node_definitions', ['category'])
        op.create_index('idx_node_definitions_deprecated', 'node_definitions', ['deprecated'])

    if 'node_parameters' not in existing_tables:
        op.create_table(
            'node_parameters',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('node_definition_id', sa.String(36),
                      sa.ForeignKey('node_definitions.id', ondelete='CASCADE'), nullable=False),
            sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
            sa.Column('parameter_name', sa.String(255), nullable=False),
            sa.Column('parameter_type', sa.String(20), nullable=False),
            sa.Column('required', sa.Boolean(), nullable=False, server_default='false'),
            sa.Column('default_value', sa.JSON(), nullable=True),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('options', sa.JSON(), nullable=True),
            sa.Column('validation_rules', sa.JSON(), nullable=True),
        )
        op.create_index('idx_node_parameters_definition', 'node_parameters', ['node_definition_id'])
        op.create_index('unique_node_parameter_name', 'node_parameters',
                        ['node_definition_id', 'parameter_name'], unique=True)

    if 'workflows' not in existing_tables:
        op.create_table(
            'workflows',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('user_id', sa.String(36), nullable=False),
            sa.Column('conversation_id', sa.String(36), nullable=True),
            sa.Column('name', sa.String(255), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('workflow_type', sa.String(50), nullable=True),
            sa.Column('workflow_json', sa.JSON(), nullable=False),
            sa.Column('status', sa.Enum('draft', 'deployed', 'active', name='workflow_status'),
                      nullable=False, server_default='draft'),
            sa.Column('is_public', sa.Boolean(), nullable=False, server_default='false'),
            *_timestamps(),
        )
        op.create_index('idx_workflows_user', 'workflows', ['user_id'])
        op.create_index('idx_workflows_conversation', 'workflows', ['conversation_id'])
        op.create_index('idx_workflows_public', 'workflows', ['is_public'])

    if 'workflow_templates' not in existing_tables:
        op.create_table(
            'workflow_templates',
            sa.Column('id', sa.String(36), primary_key=True),
            sa.Column('user_id', sa.String(36), nullable=False),
            sa.Column('name', sa.String(255), nullable=False),
            sa.Column('description', sa.Text(), nullable=True),
            sa.Column('category', sa.String(50), nullable=False, server_default='general'),
            sa.Column('tags', postgresql.ARRAY(sa.Text()), nullable=True),
            sa.Column('use_case', sa.Text(), nullable=True),
            sa.Column('workflow_json', sa.JSON(), nullable=False),
            sa.Column('difficulty', sa.Enum('beginner', 'intermediate', 'advanced', name='template_difficulty'),
                      nullable=False, server_default='beginner'),
            sa.Column('is_public', sa.Boolean(), nullable=False, server_default='false'),
            sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
            *_timestamps(),
        )
        op.create_index('idx_workflow_templates_category', 'workflow_templates', ['category'])
        op.create_index('idx_workflow_templates_user', 'workflow_templates', ['user_id'])
        op.create_index('idx_workflow_templates_public', 'workflow_templates', ['is_public'])


def downgrade() -> None:
    op.drop_table('workflow_templates')
    op.drop_table('workflows')
    op.drop_table('node_parameters')
    op.drop_table('node_definitions')
    sa.Enum(name='template_difficulty').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='workflow_status').drop(op.get_bind(), checkfirst=True)
