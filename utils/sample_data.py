import argparse
import logging
import sys

from utils.config import load_settings
from utils.logger import get_logger, setup_logging

logger = get_logger(__name__)

# Percentages deliberately total 125: the 100% rule is only enforced by the
# batch role update, not on individual rows.
SAMPLE_ROLES = [
    {'id': 'role-pm', 'role_name': 'Project Manager', 'default_allocation_percentage': 10},
    {'id': 'role-architect', 'role_name': 'Solution Architect', 'default_allocation_percentage': 20},
    {'id': 'role-ba', 'role_name': 'Business Analyst', 'default_allocation_percentage': 30},
    {'id': 'role-dev', 'role_name': 'Software Developer', 'default_allocation_percentage': 40},
    {'id': 'role-qa', 'role_name': 'QA Engineer', 'default_allocation_percentage': 25},
]

SAMPLE_STAFF = [
    {
        'id': 'staff-alice',
        'name': 'Alice Johnson',
        'title': 'Senior Project Manager',
        'role': 'Project Manager',
        'hourly_cost': 150,
        'hours_quota': 40,
        'email': 'alice.johnson@company.com',
        'phone': '+1 555-0101',
        'bio': 'Alice is an experienced Project Manager with over 12 years of experience leading '
               'cross-functional teams. She specializes in agile methodologies and has delivered '
               'projects ranging from small startups to enterprise-level implementations.',
        'executive_summary': 'Seasoned project management professional with a proven track record in '
                             'delivering complex technology projects on time and within budget. PMP and '
                             'Scrum Master certified.',
        'skills': ['Project Management', 'Agile/Scrum', 'Risk Management', 'Stakeholder Management',
                   'Budget Planning', 'Team Leadership'],
        'education': [
            {'degree': 'MBA', 'institution': 'Stanford University', 'year': '2012'},
            {'degree': 'BS Computer Science', 'institution': 'MIT', 'year': '2008'},
        ],
        'experience': [
            {'company': 'Tech Corp', 'role': 'Senior PM', 'duration': '2018-Present',
             'description': 'Leading enterprise software projects'},
            {'company': 'Innovate Inc', 'role': 'Project Manager', 'duration': '2014-2018',
             'description': 'Managed agile teams'},
        ],
        'certifications': ['PMP', 'Certified Scrum Master', 'PRINCE2'],
    },
    {
        'id': 'staff-bob',
        'name': 'Bob Smith',
        'title': 'Lead Solution Architect',
        'role': 'Solution Architect',
        'hourly_cost': 175,
        'hours_quota': 45,
        'email': 'bob.smith@company.com',
        'phone': '+1 555-0102',
        'bio': 'Bob is a Lead Solution Architect with 15 years of experience designing scalable '
               'enterprise systems, specializing in cloud architecture and microservices.',
        'executive_summary': 'Technology leader with extensive experience designing and implementing '
                             'enterprise-scale, cloud-native solutions.',
        'skills': ['Cloud Architecture', 'AWS', 'Azure', 'Microservices', 'System Design', 'Docker', 'Kubernetes'],
        'education': [
            {'degree': 'MS Computer Science', 'institution': 'Carnegie Mellon', 'year': '2010'},
            {'degree': 'BS Software Engineering', 'institution': 'UC Berkeley', 'year': '2007'},
        ],
        'experience': [
            {'company': 'Tech Corp', 'role': 'Lead Architect', 'duration': '2019-Present',
             'description': 'Designing cloud solutions'},
            {'company': 'Cloud Systems Inc', 'role': 'Senior Architect', 'duration': '2015-2019',
             'description': 'AWS migrations'},
        ],
        'certifications': ['AWS Solutions Architect Professional', 'Azure Solutions Architect', 'TOGAF'],
    },
    {
        'id': 'staff-carol',
        'name': 'Carol Williams',
        'title': 'Senior Business Analyst',
        'role': 'Business Analyst',
        'hourly_cost': 125,
        'hours_quota': 40,
        'email': 'carol.williams@company.com',
        'phone': '+1 555-0103',
        'bio': 'Carol is a Senior Business Analyst with 8 years of experience in requirements '
               'gathering, process optimization, and stakeholder communication.',
        'executive_summary': 'Results-driven business analyst who translates complex business '
                             'requirements into actionable technical specifications.',
        'skills': ['Requirements Analysis', 'Process Modeling', 'SQL', 'Data Analysis', 'User Stories', 'JIRA'],
        'education': [
            {'degree': 'MBA', 'institution': 'Northwestern Kellogg', 'year': '2016'},
            {'degree': 'BS Business Administration', 'institution': 'University of Michigan', 'year': '2013'},
        ],
        'experience': [
            {'company': 'Tech Corp', 'role': 'Senior BA', 'duration': '2020-Present',
             'description': 'Leading requirements analysis'},
            {'company': 'Consulting Group', 'role': 'Business Analyst', 'duration': '2016-2020',
             'description': 'Client consulting'},
        ],
        'certifications': ['CBAP', 'Six Sigma Green Belt'],
    },
    {
        'id': 'staff-dave',
        'name': 'Dave Brown',
        'title': 'Senior Full Stack Developer',
        'role': 'Software Developer',
        'hourly_cost': 140,
        'hours_quota': 40,
        'email': 'dave.brown@company.com',
        'phone': '+1 555-0104',
        'bio': 'Dave is a Senior Full Stack Developer with 10 years of experience building modern '
               'web applications with React, Node.js, and cloud-native tooling.',
        'executive_summary': 'Full-stack developer focused on clean code, test-driven development, '
                             'and continuous integration.',
        'skills': ['React', 'Node.js', 'TypeScript', 'PostgreSQL', 'AWS', 'Docker', 'GraphQL'],
        'education': [
            {'degree': 'MS Software Engineering', 'institution': 'Georgia Tech', 'year': '2014'},
            {'degree': 'BS Computer Science', 'institution': 'Purdue University', 'year': '2012'},
        ],
        'experience': [
            {'company': 'Tech Corp', 'role': 'Senior Developer', 'duration': '2019-Present',
             'description': 'Full stack development'},
            {'company': 'StartupXYZ', 'role': 'Developer', 'duration': '2015-2019',
             'description': 'Building web apps'},
        ],
        'certifications': ['AWS Developer Associate', 'MongoDB Certified Developer'],
    },
    {
        'id': 'staff-eve',
        'name': 'Eve Davis',
        'title': 'Software Developer',
        'role': 'Software Developer',
        'hourly_cost': 120,
        'hours_quota': 40,
        'email': 'eve.davis@company.com',
        'phone': '+1 555-0105',
        'bio': 'Eve is a Software Developer with 5 years of experience focused on backend '
               'development and API design.',
        'executive_summary': 'Backend developer experienced with RESTful APIs, database design, '
                             'and microservices.',
        'skills': ['Python', 'Java', 'REST APIs', 'PostgreSQL', 'Redis', 'Git'],
        'education': [
            {'degree': 'BS Computer Science', 'institution': 'UCLA', 'year': '2019'},
        ],
        'experience': [
            {'company': 'Tech Corp', 'role': 'Developer', 'duration': '2021-Present',
             'description': 'Backend development'},
            {'company': 'Digital Agency', 'role': 'Junior Developer', 'duration': '2019-2021',
             'description': 'API development'},
        ],
        'certifications': ['Oracle Java SE 11 Developer'],
    },
    {
        'id': 'staff-frank',
        'name': 'Frank Miller',
        'title': 'QA Lead',
        'role': 'QA Engineer',
        'hourly_cost': 110,
        'hours_quota': 40,
        'email': 'frank.miller@company.com',
        'phone': '+1 555-0106',
        'bio': 'Frank is a QA Lead with 7 years of experience in software testing, test '
               'automation, and CI/CD integration.',
        'executive_summary': 'QA professional with expertise in manual and automated testing, '
                             'performance testing, and quality processes.',
        'skills': ['Selenium', 'Cypress', 'Jest', 'Performance Testing', 'CI/CD', 'Test Planning'],
        'education': [
            {'degree': 'BS Information Technology', 'institution': 'Arizona State', 'year': '2017'},
        ],
        'experience': [
            {'company': 'Tech Corp', 'role': 'QA Lead', 'duration': '2020-Present',
             'description': 'Leading QA team'},
            {'company': 'QA Services', 'role': 'QA Engineer', 'duration': '2017-2020',
             'description': 'Test automation'},
        ],
        'certifications': ['ISTQB Advanced Level', 'AWS Cloud Practitioner'],
    },
]

SAMPLE_PROJECTS = [
    {
        'id': 'project-website',
        'name': 'Corporate Website Redesign',
        'description': 'Complete redesign of the corporate website with modern UI/UX, improved '
                       'performance, and mobile responsiveness.',
        'status': 'Active',
        'deal_size': 75000,
        'blended_rate': 125,
        'start_date': '2024-01-15',
        'end_date': '2024-06-30',
        'period_months': 6,
        'tech_stack': ['React', 'Next.js', 'Tailwind CSS', 'PostgreSQL', 'AWS'],
        'enduser_name': 'Acme Corporation',
        'partner_name': 'Digital Partners Inc',
    },
    {
        'id': 'project-crm',
        'name': 'CRM System Implementation',
        'description': 'Implementation of a custom CRM system to replace legacy tools and improve '
                       'sales team productivity.',
        'status': 'Active',
        'deal_size': 150000,
        'blended_rate': 140,
        'start_date': '2024-02-01',
        'end_date': '2024-09-30',
        'period_months': 8,
        'tech_stack': ['Node.js', 'React', 'MongoDB', 'Redis', 'Docker'],
        'enduser_name': 'Global Sales Inc',
        'partner_name': 'Enterprise Solutions',
    },
    {
        'id': 'project-mobile',
        'name': 'Mobile App Development',
        'description': 'Development of iOS and Android mobile applications for customer engagement '
                       'and loyalty program.',
        'status': 'Active',
        'deal_size': 100000,
        'blended_rate': 130,
        'start_date': '2024-03-01',
        'end_date': '2024-08-31',
        'period_months': 6,
        'tech_stack': ['React Native', 'TypeScript', 'Firebase', 'Node.js'],
        'enduser_name': 'Retail Chain Co',
    },
]

# (project_id, staff_id, role_id, allocated_hours, logged_hours)
SAMPLE_ASSIGNMENTS = [
    ('project-website', 'staff-alice', 'role-pm', 60, 35),
    ('project-website', 'staff-bob', 'role-architect', 80, 50),
    ('project-website', 'staff-dave', 'role-dev', 300, 180),
    ('project-website', 'staff-frank', 'role-qa', 100, 45),
    ('project-crm', 'staff-alice', 'role-pm', 100, 40),
    ('project-crm', 'staff-carol', 'role-ba', 200, 85),
    ('project-crm', 'staff-eve', 'role-dev', 400, 150),
    ('project-crm', 'staff-bob', 'role-architect', 120, 60),
    ('project-mobile', 'staff-carol', 'role-ba', 100, 30),
    ('project-mobile', 'staff-dave', 'role-dev', 350, 100),
    ('project-mobile', 'staff-frank', 'role-qa', 150, 35),
]


def generate_sample_data(db_manager):
    """
    Load the sample roles, staff, projects and assignments.

    Safe to run repeatedly: rows that already exist (roles by name, everything
    else by id) are left untouched.

    Returns:
        dict with the number of rows created per table
    """
    created = {'roles': 0, 'staff': 0, 'projects': 0, 'assignments': 0}

    role_ids = {}
    for role in SAMPLE_ROLES:
        existing = db_manager.get_role_by_name(role['role_name'])
        if existing:
            role_ids[role['id']] = existing['id']
            role_ids[role['role_name']] = existing['id']
            continue
        new_id = db_manager.add_role(role)
        role_ids[role['id']] = new_id
        role_ids[role['role_name']] = new_id
        created['roles'] += 1

    existing_staff = set(db_manager.get_staff()['id'])
    for member in SAMPLE_STAFF:
        if member['id'] in existing_staff:
            continue
        staff_data = {k: v for k, v in member.items() if k != 'role'}
        staff_data['role_id'] = role_ids[member['role']]
        db_manager.add_staff(staff_data)
        created['staff'] += 1

    existing_projects = set(db_manager.get_projects()['id'])
    for project in SAMPLE_PROJECTS:
        if project['id'] in existing_projects:
            continue
        db_manager.add_project(dict(project))
        created['projects'] += 1

    assignments_df = db_manager.get_assignments()
    existing_triples = set(
        zip(assignments_df['project_id'], assignments_df['staff_id'], assignments_df['role_id'])
    )
    for project_id, staff_id, role_key, allocated, logged in SAMPLE_ASSIGNMENTS:
        role_id = role_ids[role_key]
        if (project_id, staff_id, role_id) in existing_triples:
            continue
        db_manager.upsert_assignment(project_id, staff_id, role_id,
                                     allocated_hours=allocated, logged_hours=logged)
        created['assignments'] += 1

    logger.info(
        f"Sample data loaded: {created['roles']} roles, {created['staff']} staff, "
        f"{created['projects']} projects, {created['assignments']} assignments"
    )
    return created


def main(argv=None):
    from utils.database import DatabaseManager

    settings = load_settings()
    parser = argparse.ArgumentParser(description="Seed the staffing dashboard database with sample data.")
    parser.add_argument("--db", default=str(settings.db_path), help="SQLite database path")
    parser.add_argument("--reset", action="store_true", help="Drop all tables before seeding")
    args = parser.parse_args(argv)

    setup_logging(log_level=logging.INFO, log_dir=settings.log_dir, log_name="seed.log")

    db = DatabaseManager(args.db)
    try:
        if args.reset:
            db.reset_database()
        created = generate_sample_data(db)
    finally:
        db.close()

    print(f"Seeded {args.db}: " + ", ".join(f"{count} {table}" for table, count in created.items()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
